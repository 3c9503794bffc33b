"""
Splits Block-ASM source text into symbols (like `block`, `costume` or `[Stage]`).

Quoted strings, target headers and monitor headers are kept whole, including
any whitespace inside them. A line break inside one of them is reported as an
unclosed literal and scanning resumes on the next line.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from basm.config.config import LITERAL_DELIMITERS
from basm.exceptions import Diagnostic, ErrorCode, diagnostic
from basm.lexer.classes import Symbol

WHITESPACE = frozenset(" \t\r\n")

UNCLOSED_LITERAL_ERRORS = {
    '"': ErrorCode.UNCLOSED_STRING_LITERAL,
    "[": ErrorCode.UNCLOSED_TARGET_HEADER,
    "{": ErrorCode.UNCLOSED_MONITOR_HEADER,
}


class ScanMode(Enum):
    NORMAL = "normal"
    IN_LITERAL = "in_literal"


@dataclass
class ScanState:
    """Everything the scanner mutates while walking one source string."""

    mode: ScanMode = ScanMode.NORMAL
    opening: Optional[str] = None
    closing: Optional[str] = None
    buffer: List[str] = field(default_factory=list)
    symbol_line: int = 1
    line: int = 1
    escaped: bool = False
    symbols: List[Symbol] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def flush(self):
        text = "".join(self.buffer)
        if text.strip():
            self.symbols.append(Symbol(text=text, line=self.symbol_line))
        self.buffer = []

    def push(self, char: str):
        if not self.buffer:
            self.symbol_line = self.line
        self.buffer.append(char)

    def enter_literal(self, opening: str):
        self.mode = ScanMode.IN_LITERAL
        self.opening = opening
        self.closing = LITERAL_DELIMITERS[opening]
        self.escaped = False

    def leave_literal(self):
        self.mode = ScanMode.NORMAL
        self.opening = None
        self.closing = None
        self.escaped = False

    def abandon_literal(self):
        """Reports the open literal as unclosed on the current line and drops it."""
        self.diagnostics.append(diagnostic(UNCLOSED_LITERAL_ERRORS[self.opening], line=self.line))
        self.buffer = []
        self.leave_literal()


def _scan_normal(state: ScanState, char: str):
    if char in WHITESPACE:
        state.flush()
        if char == "\n":
            state.line += 1
        return

    # The literal decision is only taken on the first character of a symbol
    if not state.buffer and char in LITERAL_DELIMITERS:
        state.enter_literal(char)

    state.push(char)


def _scan_literal(state: ScanState, char: str):
    if state.escaped:
        state.push(char)
        state.escaped = False
        return

    if char == "\\":
        state.escaped = True
        return

    if char == "\n":
        state.abandon_literal()
        state.line += 1
        return

    state.push(char)
    if char == state.closing:
        state.leave_literal()


def scan(source: str) -> Tuple[List[Symbol], List[Diagnostic]]:
    """
    Scans the whole source and returns its symbols in source order together
    with every unclosed-literal diagnostic found along the way.
    """
    state = ScanState()

    for char in source:
        if state.mode is ScanMode.NORMAL:
            _scan_normal(state, char)
        else:
            _scan_literal(state, char)

    # End of input acts as a final line break.
    if state.mode is ScanMode.IN_LITERAL:
        state.abandon_literal()
    state.flush()

    return state.symbols, state.diagnostics
