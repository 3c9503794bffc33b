import pytest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

from basm.config.config import KEYWORDS
from basm.exceptions import Diagnostic, ErrorCode
from basm.lexer.classes import LiteralShape, Symbol, Token, TokenKind
from basm.lexer.classifier import classify, classify_all, literal_shape


@pytest.mark.parametrize("keyword", sorted(KEYWORDS))
def test_every_keyword_is_classified_as_keyword(keyword):
    token = classify(Symbol(text=keyword, line=7))
    assert token == Token(kind=TokenKind.KEYWORD, text=keyword, line=7)


@pytest.mark.parametrize(
    "text",
    [
        pytest.param('"x"', id="string"),
        pytest.param("[x]", id="target_header"),
        pytest.param("{x}", id="monitor_header"),
        pytest.param("true", id="true"),
        pytest.param("false", id="false"),
        pytest.param("null", id="null"),
        pytest.param("123", id="integer"),
        pytest.param("1.5e3", id="exponent"),
        pytest.param("-3", id="negative"),
        pytest.param("+2.5", id="explicit_sign"),
        pytest.param(".5", id="leading_dot"),
        pytest.param("5.", id="trailing_dot"),
        pytest.param("1E-7", id="upper_exponent"),
        pytest.param('""', id="empty_string"),
        pytest.param('"a b"', id="string_with_space"),
    ],
)
def test_literals_are_classified_as_literal(text):
    token = classify(Symbol(text=text, line=2))
    assert token == Token(kind=TokenKind.LITERAL, text=text, line=2)


@pytest.mark.parametrize("text", [";", "end", "!end"])
def test_punctuators(text):
    token = classify(Symbol(text=text, line=1))
    assert token == Token(kind=TokenKind.PUNCTUATOR, text=text, line=1)


@pytest.mark.parametrize(
    "text",
    [
        pytest.param("foo", id="bare_word"),
        pytest.param("End", id="case_sensitive_punctuator"),
        pytest.param("Sem_ver", id="case_sensitive_keyword"),
        pytest.param("1_000", id="underscore_number"),
        pytest.param("inf", id="inf"),
        pytest.param("nan", id="nan"),
        pytest.param("1e", id="incomplete_exponent"),
        pytest.param('"', id="lone_quote"),
        pytest.param('"abc', id="open_quote_only"),
        pytest.param("[abc}", id="mismatched_delimiters"),
    ],
)
def test_unknown_symbols_become_diagnostics(text):
    result = classify(Symbol(text=text, line=4))
    assert isinstance(result, Diagnostic)
    assert result.code == ErrorCode.UNKNOWN_SYMBOL
    assert result.line == 4
    assert result.details == {"data": text}
    assert result.message == f"Error (line 4): Could not parse unknown symbol `{text}`"


@pytest.mark.parametrize(
    "text, shape",
    [
        ('"s"', LiteralShape.STRING),
        ("[Stage]", LiteralShape.TARGET_HEADER),
        ("{m}", LiteralShape.MONITOR_HEADER),
        ("true", LiteralShape.BOOLEAN),
        ("null", LiteralShape.NULL),
        ("0", LiteralShape.NUMBER),
        ("block", None),
    ],
)
def test_literal_shape(text, shape):
    assert literal_shape(text) is shape


def test_classify_all_collects_every_unknown_symbol():
    symbols = [
        Symbol(text="sem_ver", line=1),
        Symbol(text="what", line=1),
        Symbol(text='"3.0.0"', line=2),
        Symbol(text="huh", line=3),
    ]
    tokens, diagnostics = classify_all(symbols)

    assert tokens == [
        Token(kind=TokenKind.KEYWORD, text="sem_ver", line=1),
        Token(kind=TokenKind.LITERAL, text='"3.0.0"', line=2),
    ]
    assert [(d.code, d.line, d.details["data"]) for d in diagnostics] == [
        (ErrorCode.UNKNOWN_SYMBOL, 1, "what"),
        (ErrorCode.UNKNOWN_SYMBOL, 3, "huh"),
    ]


def test_classify_is_deterministic():
    symbols = [Symbol(text=text, line=i) for i, text in enumerate(["vm", "x", '"1"', "end"], start=1)]
    assert classify_all(symbols) == classify_all(symbols)
