import io
import json
from pathlib import Path

from pylox.ast import Literal, Print, Return
from pylox.ast_json import ast_from_obj, ast_to_obj
from pylox.interpreter import Interpreter
from pylox.parser import parse_program
from pylox.tokens import Token, TokenType
from pylox.values import NIL

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def run_statements(statements):
    out = io.StringIO()
    Interpreter(out=out).run(statements)
    return out.getvalue()


def test_json_ast_executes_like_the_parsed_program():
    source = (EXAMPLES / 'program_7.lox').read_text(encoding='utf-8')
    statements = parse_program(source)
    loaded = ast_from_obj(json.loads(json.dumps(ast_to_obj(statements))))
    assert loaded == statements
    assert run_statements(loaded) == run_statements(statements) == '1\n2\nsecond\n'


def test_nil_and_numbers_survive_json():
    statements = parse_program('var a = nil; print 3; print a;')
    data = json.loads(json.dumps(ast_to_obj(statements)))
    assert data[0]['initializer']['value'] == {'__type__': 'Nil'}
    loaded = ast_from_obj(data)
    assert loaded[0].initializer == Literal(NIL)
    assert isinstance(loaded[1].expression.value, float)
    assert run_statements(loaded) == '3\nnil\n'


def test_integer_json_numbers_load_as_floats():
    data = [{'type': 'Print', 'expression': {'type': 'Literal', 'value': 2}}]
    (stmt,) = ast_from_obj(data)
    assert stmt.expression.value == 2.0
    assert isinstance(stmt.expression.value, float)


def test_top_level_return_from_json_stops_the_program():
    keyword = Token(TokenType.RETURN, 'return', None, 1)
    statements = [Print(Literal('before')), Return(keyword, None), Print(Literal('after'))]
    loaded = ast_from_obj(json.loads(json.dumps(ast_to_obj(statements))))
    assert run_statements(loaded) == 'before\n'
