"""
Data contracts shared by the scanner and the classifier.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class Symbol(BaseModel):
    """A raw text fragment and the line it starts on."""

    model_config = ConfigDict(frozen=True)

    text: str
    line: int

    @field_validator("text")
    @classmethod
    def _not_blank(cls, text: str) -> str:
        if not text.strip():
            raise ValueError("symbols are never blank")
        return text


class TokenKind(Enum):
    KEYWORD = "Keyword"
    LITERAL = "Literal"
    PUNCTUATOR = "Punctuator"


class Token(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    text: str
    line: int


class LiteralShape(Enum):
    """The lexical form of a literal token."""

    STRING = "string"
    TARGET_HEADER = "target header"
    MONITOR_HEADER = "monitor header"
    BOOLEAN = "boolean"
    NULL = "null"
    NUMBER = "number"
