"""
Error codes, diagnostics and exception types for the Block-ASM compiler.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, computed_field


class Stage(Enum):
    ARGUMENTS = "arguments"
    SCAN = "scan"
    CLASSIFY = "classify"
    PARSE = "parse"


class ErrorCode(Enum):

    # --- Command Line Errors ---
    SOURCE_NOT_FOUND = "Could not find source at path `{path}`"
    CANNOT_READ_SOURCE = "Could not read source at path `{path}`"
    MISSING_SOURCE = "No source file was given"
    UNDETERMINED_OUTPUT_TYPE = "Cannot determine whether to output lexed or parsed data"
    UNKNOWN_TERMINAL_ARGUMENT = "Unknown terminal argument `{arg}`"

    # --- Scanner Errors ---
    UNCLOSED_STRING_LITERAL = "Found unclosed string literal"
    UNCLOSED_TARGET_HEADER = "Found unclosed target header"
    UNCLOSED_MONITOR_HEADER = "Found unclosed monitor header"

    # --- Classifier Errors ---
    UNKNOWN_SYMBOL = "Could not parse unknown symbol `{data}`"

    # --- Parser Errors ---
    UNEXPECTED_TOKEN_AT_TOP_LEVEL = "Unexpected token `{data}` at top level"
    UNEXPECTED_TOKEN_IN_SECTION = "Unexpected token `{data}` in {section} section"
    MISSING_METADATA_PAYLOAD = "Expected a string literal after `{keyword}`"
    EXPECTED_VALUE = "Expected {expected} for `{keyword}`, found `{data}`"
    MISSING_VALUE = "Expected {expected} for `{keyword}` before end of input"
    MISSING_TYPE_ANNOTATION = "Missing type annotation before `{data}` in `{keyword}`"
    MISSING_ENTRY_TERMINATOR = "Missing `;` after `{keyword}` entry, found `{data}`"
    UNTERMINATED_ENTRY = "Missing `;` to close `{keyword}` entry before end of input"
    EMPTY_TYPED_ENTRY = "Expected at least one typed value in `{keyword}` entry"
    UNCLOSED_SECTION = "Found unclosed {section} section"


class Diagnostic(BaseModel):
    """A single user-facing error, tagged with the source line it refers to."""

    model_config = ConfigDict(frozen=True)

    code: ErrorCode
    line: Optional[int] = None
    details: Dict[str, Any] = {}

    @computed_field
    @property
    def message(self) -> str:
        core_message = self.code.value.format(**self.details)
        if self.line is None:
            return f"Error: {core_message}"
        return f"Error (line {self.line}): {core_message}"

    def __str__(self) -> str:
        return self.message


def diagnostic(code: ErrorCode, line: Optional[int] = None, **kwargs) -> Diagnostic:
    return Diagnostic(code=code, line=line, details=kwargs)


class BlockAsmError(Exception):
    def __init__(self, stage: Stage, diagnostics: List[Diagnostic]):
        self.stage = stage
        self.diagnostics = list(diagnostics)
        self.message = "\n".join(d.message for d in self.diagnostics)

        super().__init__(self.message)

    @property
    def codes(self) -> List[ErrorCode]:
        return [d.code for d in self.diagnostics]


class InternalCompilerError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
