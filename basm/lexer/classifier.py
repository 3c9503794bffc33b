"""
Turns scanned symbols into tokens by matching them against the keyword
vocabulary, the literal shapes and the punctuators, in that order.
"""

import re
from typing import List, Optional, Tuple, Union

from basm.config.config import BOOLEAN_LITERALS, KEYWORDS, NULL_LITERAL, PUNCTUATORS
from basm.exceptions import Diagnostic, ErrorCode, diagnostic
from basm.lexer.classes import LiteralShape, Symbol, Token, TokenKind

NUMBER_REGEX = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")

DELIMITED_SHAPES = {
    ('"', '"'): LiteralShape.STRING,
    ("[", "]"): LiteralShape.TARGET_HEADER,
    ("{", "}"): LiteralShape.MONITOR_HEADER,
}


def _delimited_shape(text: str) -> Optional[LiteralShape]:
    if len(text) < 2:
        return None
    return DELIMITED_SHAPES.get((text[0], text[-1]))


def literal_shape(text: str) -> Optional[LiteralShape]:
    """Returns the lexical form of `text` if it is a literal, otherwise None."""
    shape = _delimited_shape(text)
    if shape is not None:
        return shape
    if text in BOOLEAN_LITERALS:
        return LiteralShape.BOOLEAN
    if text == NULL_LITERAL:
        return LiteralShape.NULL
    if NUMBER_REGEX.fullmatch(text):
        return LiteralShape.NUMBER
    return None


def strip_delimiters(text: str) -> str:
    """Removes the first and last character of a delimited literal."""
    return text[1:-1]


def classify(symbol: Symbol) -> Union[Token, Diagnostic]:
    if symbol.text in KEYWORDS:
        return Token(kind=TokenKind.KEYWORD, text=symbol.text, line=symbol.line)

    if literal_shape(symbol.text) is not None:
        return Token(kind=TokenKind.LITERAL, text=symbol.text, line=symbol.line)

    if symbol.text in PUNCTUATORS:
        return Token(kind=TokenKind.PUNCTUATOR, text=symbol.text, line=symbol.line)

    return diagnostic(ErrorCode.UNKNOWN_SYMBOL, line=symbol.line, data=symbol.text)


def classify_all(symbols: List[Symbol]) -> Tuple[List[Token], List[Diagnostic]]:
    """Classifies every symbol, collecting all unknown-symbol diagnostics."""
    tokens: List[Token] = []
    diagnostics: List[Diagnostic] = []

    for symbol in symbols:
        result = classify(symbol)
        if isinstance(result, Diagnostic):
            diagnostics.append(result)
        else:
            tokens.append(result)

    return tokens, diagnostics
