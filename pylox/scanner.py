"""Scanner for the Lox language.

Source text is split into tokens by a Lark lexer. Only the lexing half of
Lark is used: the grammar below exists to declare terminals, and the
token stream is handed to the recursive-descent parser in
`pylox.parser`, which never sees Lark types.

Keywords are declared as string terminals; Lark retypes an IDENTIFIER
match whose text equals a keyword, so `orchid` stays an identifier while
`or` becomes the OR keyword. Longer operators (`==`, `<=`) are tried
before their one-character prefixes.
"""

from __future__ import annotations

from typing import List

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from .errors import ScanError
from .tokens import Token, TokenType

_VALUE_TOKENS = (TokenType.IDENTIFIER, TokenType.STRING, TokenType.NUMBER, TokenType.EOF)
_FIXED_TOKENS = [t for t in TokenType if t not in _VALUE_TOKENS]


def _build_grammar() -> str:
    names = [t.name for t in _FIXED_TOKENS] + ['NUMBER', 'STRING', 'IDENTIFIER']
    lines = [
        'start: _token*',
        '_token: ' + ' | '.join(names),
    ]
    for t in _FIXED_TOKENS:
        lines.append(f'{t.name}: "{t.value}"')
    lines += [
        r'NUMBER: /[0-9]+(\.[0-9]+)?/',
        r'STRING: /"[^"]*"/',
        r'IDENTIFIER: /[A-Za-z_][A-Za-z0-9_]*/',
        r'COMMENT: /\/\/[^\n]*/',
        '%import common.WS',
        '%ignore WS',
        '%ignore COMMENT',
    ]
    return '\n'.join(lines)


LOX_GRAMMAR = _build_grammar()

LOX_LEXER = Lark(
    LOX_GRAMMAR,
    parser='lalr',
    lexer='basic',
)


def scan_tokens(source: str) -> List[Token]:
    """Convert source text into a list of tokens ending with EOF.

    Raises ScanError on a character that starts no token, which
    includes the opening quote of an unterminated string.
    """
    tokens: List[Token] = []
    try:
        for lark_token in LOX_LEXER.lex(source):
            tokens.append(_convert(lark_token))
    except UnexpectedCharacters as e:
        if e.char == '"':
            raise ScanError(e.line, e.column, 'Unterminated string.') from None
        raise ScanError(e.line, e.column, f"Unexpected character {e.char!r}.") from None
    tokens.append(Token(TokenType.EOF, '', None, source.count('\n') + 1))
    return tokens


def _convert(lark_token) -> Token:
    token_type = TokenType[lark_token.type]
    lexeme = str(lark_token)
    if token_type == TokenType.NUMBER:
        literal = float(lexeme)
    elif token_type == TokenType.STRING:
        literal = lexeme[1:-1]
    elif token_type == TokenType.IDENTIFIER:
        literal = lexeme
    else:
        literal = None
    return Token(token_type, lexeme, literal, lark_token.line)
