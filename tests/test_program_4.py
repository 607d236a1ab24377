from pathlib import Path

from pylox.interpreter import Interpreter
from pylox.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_4_strings_and_equality(capsys):
    source = (EXAMPLES / 'program_4.lox').read_text(encoding='utf-8')
    statements = parse_program(source)
    interp = Interpreter()
    interp.run(statements)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['ab', 'true', 'false', 'true', 'true']
