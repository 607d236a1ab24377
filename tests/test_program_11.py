from pathlib import Path

from pylox.interpreter import Interpreter
from pylox.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_11_for_without_condition(capsys):
    # An absent condition loops forever; only the return ends the loop.
    source = (EXAMPLES / 'program_11.lox').read_text(encoding='utf-8')
    statements = parse_program(source)
    interp = Interpreter()
    interp.run(statements)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['8']
