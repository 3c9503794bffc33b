"""
Builds the syntax tree from the classified token sequence.

The parser is a state machine driven by a stack of frames. The bottom frame
is the document root; metadata keywords, target/monitor headers, section
keywords and property keywords push frames that say what the next token
must be. Every frame kind has its own handler. A handler returns True when it
consumed the token and False when the token has to be handed to the frame
that is now on top of the stack (after the handler popped its own frame).

Errors never stop the parse: each one is recorded as a diagnostic and the
parser resynchronizes and keeps going, so a single run reports everything.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, assert_never

from basm.config.config import (
    METADATA_KEYWORDS,
    NESTING_SECTIONS,
    SECTION_KEYWORDS,
    SECTION_SCHEMAS,
    TYPE_ANNOTATIONS,
    ValueKind,
)
from basm.exceptions import Diagnostic, ErrorCode, InternalCompilerError, diagnostic
from basm.lexer.classes import LiteralShape, Token, TokenKind
from basm.lexer.classifier import literal_shape, strip_delimiters

from .classes import Node, NodeKind, make_leaf, make_node

HEADER_SHAPES = {
    LiteralShape.TARGET_HEADER: NodeKind.TARGET,
    LiteralShape.MONITOR_HEADER: NodeKind.MONITOR,
}

# Literal shape -> leaf kind, for every value kind a property can expect.
VALUE_LEAVES = {
    ValueKind.STRING: {LiteralShape.STRING: NodeKind.STRING_DATA},
    ValueKind.STRING_OR_NULL: {LiteralShape.STRING: NodeKind.STRING_DATA, LiteralShape.NULL: NodeKind.NULL_DATA},
    ValueKind.BOOL: {LiteralShape.BOOLEAN: NodeKind.BOOL_DATA},
    ValueKind.DOUBLE: {LiteralShape.NUMBER: NodeKind.DOUBLE_DATA},
    ValueKind.POS_DOUBLE: {LiteralShape.NUMBER: NodeKind.POS_DOUBLE_DATA},
    ValueKind.INT: {LiteralShape.NUMBER: NodeKind.INT_DATA},
    ValueKind.POS_INT: {LiteralShape.NUMBER: NodeKind.POS_INT_DATA},
    ValueKind.ANGLE: {LiteralShape.NUMBER: NodeKind.ANGLE_DATA},
    ValueKind.BLOCK_PTR_OR_NULL: {LiteralShape.STRING: NodeKind.BLOCK_PTR_DATA, LiteralShape.NULL: NodeKind.NULL_DATA},
    ValueKind.SCALAR: {
        LiteralShape.STRING: NodeKind.STRING_DATA,
        LiteralShape.NUMBER: NodeKind.DOUBLE_DATA,
        LiteralShape.BOOLEAN: NodeKind.BOOL_DATA,
    },
    # Entries start with their name
    ValueKind.TYPED_VALUES: {LiteralShape.STRING: NodeKind.STRING_DATA},
    ValueKind.KEY_VALUE: {LiteralShape.STRING: NodeKind.STRING_DATA},
}

SHAPE_DESCRIPTIONS = {
    LiteralShape.STRING: ValueKind.STRING.value,
    LiteralShape.NUMBER: ValueKind.DOUBLE.value,
}


class FrameKind(Enum):
    ROOT = "root"
    METADATA_PAYLOAD = "metadata_payload"
    SECTION = "section"
    PROPERTY_VALUE = "property_value"
    TYPED_VALUES = "typed_values"
    ANNOTATED_LITERAL = "annotated_literal"


@dataclass
class Frame:
    kind: FrameKind
    node: Node
    line: int
    keyword: str = ""
    value_kind: Optional[ValueKind] = None
    leaf_kind: Optional[NodeKind] = None
    shape: Optional[LiteralShape] = None
    values: int = 0


@dataclass
class ParserState:
    tokens: List[Token]
    root: Node
    stack: List[Frame] = field(default_factory=list)
    cursor: int = 0
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def frame(self) -> Frame:
        return self.stack[-1]

    def push(self, frame: Frame):
        self.stack.append(frame)

    def pop(self) -> Frame:
        return self.stack.pop()

    def report(self, code: ErrorCode, line: int, **kwargs):
        self.diagnostics.append(diagnostic(code, line=line, **kwargs))


# --- Helpers ---


def _payload(token: Token, shape: LiteralShape) -> Optional[str]:
    if shape is LiteralShape.NULL:
        return None
    if shape is LiteralShape.STRING:
        return strip_delimiters(token.text)
    return token.text


def _shape(token: Token) -> Optional[LiteralShape]:
    if token.kind is not TokenKind.LITERAL:
        return None
    return literal_shape(token.text)


def _is_header(token: Token) -> bool:
    return _shape(token) in HEADER_SHAPES


def _consumes_bad_value(token: Token) -> bool:
    """A rejected value is skipped only if it is a plain literal; anything structural is handed back."""
    return token.kind is TokenKind.LITERAL and not _is_header(token)


def _open_header(state: ParserState, token: Token, kind: NodeKind):
    node = state.root.append(make_node(kind, token.line))
    node.append(make_leaf(NodeKind.STRING_DATA, strip_delimiters(token.text), token.line))
    state.push(Frame(FrameKind.SECTION, node, token.line))


def _value_frame(node: Node, keyword: str, value_kind: ValueKind, line: int) -> Frame:
    return Frame(FrameKind.PROPERTY_VALUE, node, line, keyword=keyword, value_kind=value_kind)


def _close_sections(state: ParserState):
    """Reports every open section as unclosed and returns to the root frame."""
    while len(state.stack) > 1:
        frame = state.pop()
        state.report(ErrorCode.UNCLOSED_SECTION, frame.line, section=frame.node.kind.value)


# --- Frame handlers ---


def _parse_root(state: ParserState, token: Token) -> bool:
    kind = token.kind
    if kind is TokenKind.KEYWORD:
        node_kind = METADATA_KEYWORDS.get(token.text)
        if node_kind is None:
            state.report(ErrorCode.UNEXPECTED_TOKEN_AT_TOP_LEVEL, token.line, data=token.text)
            return True

        node = state.root.append(make_node(node_kind, token.line))
        state.push(Frame(FrameKind.METADATA_PAYLOAD, node, token.line, keyword=token.text))
    elif kind is TokenKind.LITERAL:
        header_kind = HEADER_SHAPES.get(literal_shape(token.text))
        if header_kind is None:
            state.report(ErrorCode.UNEXPECTED_TOKEN_AT_TOP_LEVEL, token.line, data=token.text)
            return True

        _open_header(state, token, header_kind)
    elif kind is TokenKind.PUNCTUATOR:
        state.report(ErrorCode.UNEXPECTED_TOKEN_AT_TOP_LEVEL, token.line, data=token.text)
    else:
        assert_never(kind)
    return True


def _parse_metadata_payload(state: ParserState, token: Token) -> bool:
    frame = state.pop()
    if _shape(token) is LiteralShape.STRING:
        frame.node.append(make_leaf(NodeKind.STRING_DATA, strip_delimiters(token.text), token.line))
    else:
        # The metadata node stays in the tree without a payload
        state.report(ErrorCode.UNEXPECTED_TOKEN_AT_TOP_LEVEL, token.line, data=token.text)
    return True


def _parse_section(state: ParserState, token: Token) -> bool:
    frame = state.frame
    section = frame.node.kind
    kind = token.kind

    if kind is TokenKind.PUNCTUATOR:
        if token.text == "end":
            state.pop()
        elif token.text == "!end":
            del state.stack[1:]
        # `;` is an optional separator between entries
    elif kind is TokenKind.KEYWORD:
        schema = SECTION_SCHEMAS[section]
        if token.text in schema:
            node_kind, value_kind = schema[token.text]
            node = frame.node.append(make_node(node_kind, token.line))
            state.push(_value_frame(node, token.text, value_kind, token.line))
        elif section in NESTING_SECTIONS and token.text in SECTION_KEYWORDS:
            node = frame.node.append(make_node(SECTION_KEYWORDS[token.text], token.line))
            state.push(Frame(FrameKind.SECTION, node, token.line, keyword=token.text))
        else:
            state.report(ErrorCode.UNEXPECTED_TOKEN_IN_SECTION, token.line, data=token.text, section=section.value)
    elif kind is TokenKind.LITERAL:
        if _is_header(token):
            # A new header while sections are still open; close them and start over at root
            _close_sections(state)
            return False
        state.report(ErrorCode.UNEXPECTED_TOKEN_IN_SECTION, token.line, data=token.text, section=section.value)
    else:
        assert_never(kind)
    return True


def _parse_property_value(state: ParserState, token: Token) -> bool:
    frame = state.pop()
    shape = _shape(token)
    leaf_kind = VALUE_LEAVES[frame.value_kind].get(shape)

    if leaf_kind is None:
        state.report(ErrorCode.EXPECTED_VALUE, token.line, expected=frame.value_kind.value, keyword=frame.keyword, data=token.text)
        return _consumes_bad_value(token)

    frame.node.append(make_leaf(leaf_kind, _payload(token, shape), token.line))

    if frame.value_kind is ValueKind.TYPED_VALUES:
        state.push(Frame(FrameKind.TYPED_VALUES, frame.node, frame.line, keyword=frame.keyword))
    elif frame.value_kind is ValueKind.KEY_VALUE:
        state.push(_value_frame(frame.node, frame.keyword, ValueKind.STRING, frame.line))
    return True


def _parse_typed_values(state: ParserState, token: Token) -> bool:
    frame = state.frame
    kind = token.kind

    if kind is TokenKind.PUNCTUATOR:
        state.pop()
        if token.text == ";":
            if frame.values == 0:
                state.report(ErrorCode.EMPTY_TYPED_ENTRY, token.line, keyword=frame.keyword)
            return True
        state.report(ErrorCode.MISSING_ENTRY_TERMINATOR, token.line, keyword=frame.keyword, data=token.text)
        return False
    elif kind is TokenKind.KEYWORD:
        annotation = TYPE_ANNOTATIONS.get(token.text)
        if annotation is None:
            state.pop()
            state.report(ErrorCode.MISSING_ENTRY_TERMINATOR, token.line, keyword=frame.keyword, data=token.text)
            return False

        leaf_kind, shape = annotation
        frame.values += 1
        state.push(Frame(FrameKind.ANNOTATED_LITERAL, frame.node, token.line, keyword=token.text, leaf_kind=leaf_kind, shape=shape))
    elif kind is TokenKind.LITERAL:
        shape = literal_shape(token.text)
        if shape is LiteralShape.NULL:
            frame.node.append(make_leaf(NodeKind.NULL_DATA, None, token.line))
            frame.values += 1
        elif shape in HEADER_SHAPES:
            state.pop()
            state.report(ErrorCode.MISSING_ENTRY_TERMINATOR, token.line, keyword=frame.keyword, data=token.text)
            return False
        else:
            frame.values += 1
            state.report(ErrorCode.MISSING_TYPE_ANNOTATION, token.line, keyword=frame.keyword, data=token.text)
    else:
        assert_never(kind)
    return True


def _parse_annotated_literal(state: ParserState, token: Token) -> bool:
    frame = state.pop()
    shape = _shape(token)

    if shape is not frame.shape:
        state.report(ErrorCode.EXPECTED_VALUE, token.line, expected=SHAPE_DESCRIPTIONS[frame.shape], keyword=frame.keyword, data=token.text)
        return _consumes_bad_value(token)

    frame.node.append(make_leaf(frame.leaf_kind, _payload(token, shape), token.line))
    return True


def _dispatch(state: ParserState, token: Token) -> bool:
    kind = state.frame.kind
    if kind is FrameKind.ROOT:
        return _parse_root(state, token)
    elif kind is FrameKind.METADATA_PAYLOAD:
        return _parse_metadata_payload(state, token)
    elif kind is FrameKind.SECTION:
        return _parse_section(state, token)
    elif kind is FrameKind.PROPERTY_VALUE:
        return _parse_property_value(state, token)
    elif kind is FrameKind.TYPED_VALUES:
        return _parse_typed_values(state, token)
    elif kind is FrameKind.ANNOTATED_LITERAL:
        return _parse_annotated_literal(state, token)
    else:
        assert_never(kind)


def _finish(state: ParserState):
    """Reports whatever is still open once the tokens run out, innermost first."""
    while len(state.stack) > 1:
        frame = state.pop()
        kind = frame.kind
        if kind is FrameKind.METADATA_PAYLOAD:
            state.report(ErrorCode.MISSING_METADATA_PAYLOAD, frame.line, keyword=frame.keyword)
        elif kind is FrameKind.SECTION:
            state.report(ErrorCode.UNCLOSED_SECTION, frame.line, section=frame.node.kind.value)
        elif kind is FrameKind.PROPERTY_VALUE:
            state.report(ErrorCode.MISSING_VALUE, frame.line, expected=frame.value_kind.value, keyword=frame.keyword)
        elif kind is FrameKind.TYPED_VALUES:
            state.report(ErrorCode.UNTERMINATED_ENTRY, frame.line, keyword=frame.keyword)
        elif kind is FrameKind.ANNOTATED_LITERAL:
            state.report(ErrorCode.MISSING_VALUE, frame.line, expected=SHAPE_DESCRIPTIONS[frame.shape], keyword=frame.keyword)
        elif kind is FrameKind.ROOT:
            raise InternalCompilerError("The root frame is never above another frame.")
        else:
            assert_never(kind)


def parse(tokens: List[Token]) -> Tuple[Node, List[Diagnostic]]:
    """
    Parses the whole token sequence into a tree rooted at a `Root` node.

    The tree is returned even when diagnostics were reported; in that case it
    is incomplete and only useful for inspection.
    """
    root = make_node(NodeKind.ROOT, 1)
    state = ParserState(tokens=list(tokens), root=root)
    state.push(Frame(FrameKind.ROOT, root, root.line))

    while state.cursor < len(state.tokens):
        token = state.tokens[state.cursor]
        if _dispatch(state, token):
            state.cursor += 1

    _finish(state)
    return root, state.diagnostics
