from pathlib import Path

from pylox.interpreter import Interpreter
from pylox.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_3_arithmetic(capsys):
    source = (EXAMPLES / 'program_3.lox').read_text(encoding='utf-8')
    statements = parse_program(source)
    interp = Interpreter()
    interp.run(statements)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['3', '7', '2.5', '-3', 'inf', 'true']
