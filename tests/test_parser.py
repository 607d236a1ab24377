import pytest

from pylox.ast import (
    Assign, Binary, Block, Call, Expression, Function, Grouping, If, Literal,
    Logical, Print, Return, Unary, Var, Variable, While,
)
from pylox.errors import ParseError, ParseErrors
from pylox.parser import Parser, parse_program
from pylox.scanner import scan_tokens
from pylox.tokens import TokenType
from pylox.values import NIL


def parse_expr(source):
    (stmt,) = parse_program(source + ';')
    assert isinstance(stmt, Expression)
    return stmt.expression


def parse_errors(source):
    with pytest.raises(ParseErrors) as excinfo:
        parse_program(source)
    return excinfo.value.errors


def test_factor_binds_tighter_than_term():
    expr = parse_expr('1 + 2 * 3')
    assert isinstance(expr, Binary)
    assert expr.operator.type == TokenType.PLUS
    assert isinstance(expr.right, Binary)
    assert expr.right.operator.type == TokenType.STAR


def test_binary_levels_are_left_associative():
    expr = parse_expr('10 - 4 - 3')
    assert expr.operator.type == TokenType.MINUS
    assert isinstance(expr.left, Binary)
    assert expr.left.left == Literal(10.0)
    assert expr.right == Literal(3.0)


def test_assignment_is_right_associative():
    expr = parse_expr('a = b = 1')
    assert isinstance(expr, Assign)
    assert expr.name.lexeme == 'a'
    assert isinstance(expr.value, Assign)
    assert expr.value.name.lexeme == 'b'


def test_logical_precedence():
    expr = parse_expr('a or b and c')
    assert isinstance(expr, Logical)
    assert expr.operator.type == TokenType.OR
    assert isinstance(expr.right, Logical)
    assert expr.right.operator.type == TokenType.AND


def test_unary_nests_and_grouping_is_kept():
    expr = parse_expr('!-(1)')
    assert isinstance(expr, Unary)
    assert isinstance(expr.right, Unary)
    assert isinstance(expr.right.right, Grouping)


def test_literals():
    assert parse_expr('true') == Literal(True)
    assert parse_expr('false') == Literal(False)
    assert parse_expr('nil') == Literal(NIL)
    assert parse_expr('"s"') == Literal('s')


def test_chained_calls():
    expr = parse_expr('f(1)(2, 3)()')
    assert isinstance(expr, Call)
    assert expr.arguments == []
    inner = expr.callee
    assert isinstance(inner, Call) and len(inner.arguments) == 2
    assert isinstance(inner.callee, Call)
    assert isinstance(inner.callee.callee, Variable)
    assert inner.callee.callee.name.lexeme == 'f'
    assert expr.paren.type == TokenType.RIGHT_PAREN


def test_for_desugars_into_while_inside_block():
    (stmt,) = parse_program('for (var i = 0; i < 3; i = i + 1) print i;')
    assert isinstance(stmt, Block)
    init, loop = stmt.statements
    assert isinstance(init, Var)
    assert isinstance(loop, While)
    assert isinstance(loop.condition, Binary)
    body, increment = loop.body.statements
    assert isinstance(body, Print)
    assert isinstance(increment, Expression)
    assert isinstance(increment.expression, Assign)


def test_for_without_clauses_loops_forever():
    (stmt,) = parse_program('for (;;) print 1;')
    assert isinstance(stmt, While)
    assert stmt.condition == Literal(True)
    assert isinstance(stmt.body, Print)


def test_function_declaration_and_return():
    (fn,) = parse_program('fun add(a, b) { return a + b; }')
    assert isinstance(fn, Function)
    assert [p.lexeme for p in fn.params] == ['a', 'b']
    (ret,) = fn.body
    assert isinstance(ret, Return)
    assert isinstance(ret.value, Binary)


def test_if_else_binds_to_nearest_if():
    (stmt,) = parse_program('if (a) if (b) print 1; else print 2;')
    assert isinstance(stmt, If)
    assert stmt.else_branch is None
    assert isinstance(stmt.then_branch, If)
    assert isinstance(stmt.then_branch.else_branch, Print)


def test_consume_reports_token_and_position():
    (error,) = parse_errors('print (1 + 2;')
    assert isinstance(error, ParseError)
    assert error.message == "Expect ')' after expression."
    assert error.token.type == TokenType.SEMICOLON
    assert error.position == 5
    assert str(error) == "[line 1] Error at ';': Expect ')' after expression."


def test_error_at_end_of_input():
    (error,) = parse_errors('print 1')
    assert error.token.type == TokenType.EOF
    assert 'at end' in str(error)


def test_invalid_assignment_target():
    (error,) = parse_errors('1 + a = 3;')
    assert error.message == 'Invalid assignment target.'
    assert error.token.type == TokenType.EQUAL


def test_recovery_reports_one_error_per_statement():
    errors = parse_errors('var = 1;\nprint 2;\nprint (;\nvar ok = 3;\n1 +;')
    assert [e.token.line for e in errors] == [1, 3, 5]
    assert errors[0].message == 'Expect variable name.'
    assert errors[1].message == 'Expect expression.'


def test_recovery_inside_block_keeps_parsing():
    errors = parse_errors('{ var x = ; print x; } print )')
    assert len(errors) == 2


def test_argument_cap_is_reported_but_list_is_consumed():
    args = ', '.join(['1'] * 256)
    parser = Parser(scan_tokens(f'f({args}); print 1;'))
    with pytest.raises(ParseErrors) as excinfo:
        parser.parse()
    (error,) = excinfo.value.errors
    assert error.message == "Can't have more than 255 arguments."
    # Parsing continued past the malformed call to the end of input.
    assert parser.is_at_end()


def test_parameter_cap():
    params = ', '.join(f'p{i}' for i in range(256))
    (error,) = parse_errors(f'fun f({params}) {{}}')
    assert error.message == "Can't have more than 255 parameters."


def test_255_arguments_are_allowed():
    args = ', '.join(['1'] * 255)
    expr = parse_expr(f'f({args})')
    assert len(expr.arguments) == 255


def test_return_outside_function():
    (error,) = parse_errors('return 1;')
    assert error.message == "Can't return from top-level code."


def test_declarations_are_not_expressions():
    (error,) = parse_errors('print var;')
    assert error.message == 'Expect expression.'
