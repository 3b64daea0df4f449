"""Tokenizer for tinybasic source lines.

The terminals of the dialect are declared as a small Lark grammar and
scanned with Lark's basic lexer; the parser in `tinybasic.parser` then
works on the resulting token list by recursive descent.

After scanning, alphabetic runs are classified:

* a known keyword (any case) becomes a ``KEYWORD`` token with an
  upper-case value,
* a single letter becomes an ``IDENT`` token (upper-cased),
* anything else stays a ``WORD`` token, which the parser rejects as an
  unknown keyword.

``REM`` is special: everything after it is commentary and is returned
verbatim as one ``REMARK`` token, so remarks may contain characters the
lexer would otherwise reject.
"""

from __future__ import annotations

from typing import List

from lark import Lark, Token
from lark.exceptions import UnexpectedCharacters

from .errors import LexerError


KEYWORDS = frozenset({
    'REM', 'PRINT', 'LET', 'IF', 'THEN', 'GOTO', 'GOSUB', 'RETURN',
    'INPUT', 'FOR', 'TO', 'STEP', 'NEXT', 'END', 'LIST', 'RUN', 'CLEAR',
})


LEXER_GRAMMAR = r"""
    start: (WORD | NUMBER | STRING | RELOP | ARITHOP | LPAR | RPAR | COMMA)*

    WORD: /[A-Za-z]+/
    NUMBER: /[0-9]+/
    STRING: /"[^"\n]*"/
    RELOP: /<>|<=|>=|<|>|=/
    ARITHOP: /[-+*\/]/
    LPAR: "("
    RPAR: ")"
    COMMA: ","

    WS: /[ \t\f\r\n]+/
    %ignore WS
"""


BASIC_LEXER = Lark(
    LEXER_GRAMMAR,
    parser='lalr',
    lexer='basic',
)


def classify(token: Token) -> Token:
    if token.type != 'WORD':
        return token
    word = token.value.upper()
    if word in KEYWORDS:
        return Token.new_borrow_pos('KEYWORD', word, token)
    if len(word) == 1:
        return Token.new_borrow_pos('IDENT', word, token)
    return Token.new_borrow_pos('WORD', word, token)


def tokenize(source: str) -> List[Token]:
    """Convert one source line (without its line number) into tokens.

    Raises `LexerError` naming the first unrecognized character.
    """
    tokens: List[Token] = []
    try:
        for raw in BASIC_LEXER.lex(source):
            token = classify(raw)
            tokens.append(token)
            if token.type == 'KEYWORD' and token.value == 'REM':
                # the rest of the line is never scanned
                remark = source[raw.end_pos:].strip()
                tokens.append(Token.new_borrow_pos('REMARK', remark, raw))
                break
    except UnexpectedCharacters as e:
        raise LexerError(e.char, e.column) from None
    return tokens
