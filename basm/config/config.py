"""
Static configuration data for the Block-ASM compiler.
This includes version strings, the keyword vocabulary and the section schemas
that drive the parser.
"""

from enum import Enum

from basm.lexer.classes import LiteralShape
from basm.parser.core.classes import NodeKind

BASM_VERSION = "0.1.0"
TARGET_SCRATCH_VERSION = "3.0"


class ValueKind(Enum):
    """What a property keyword expects as its value."""

    STRING = "a string literal"
    STRING_OR_NULL = "a string literal or `null`"
    BOOL = "`true` or `false`"
    DOUBLE = "a number"
    POS_DOUBLE = "a non-negative number"
    INT = "an integer"
    POS_INT = "a non-negative integer"
    ANGLE = "an angle"
    BLOCK_PTR_OR_NULL = "a block id or `null`"
    SCALAR = "a string, number or boolean"
    TYPED_VALUES = "an entry name"
    KEY_VALUE = "a parameter name"


METADATA_KEYWORDS = {
    "sem_ver": NodeKind.SEM_VER,
    "vm": NodeKind.VM,
    "agent": NodeKind.AGENT,
}

# Keywords that open a nested section inside a target body.
SECTION_KEYWORDS = {
    "block": NodeKind.BLOCK,
    "costume": NodeKind.COSTUME,
    "sound": NodeKind.SOUND,
    "variable": NodeKind.VARIABLE,
    "list": NodeKind.LIST,
    "broadcast": NodeKind.BROADCAST,
}

# Annotation keyword -> (leaf kind, literal shape it accepts). Used inside
# `input` and `field` entries.
TYPE_ANNOTATIONS = {
    "prototype": (NodeKind.PROTOTYPE_DATA, LiteralShape.STRING),
    "block_ptr": (NodeKind.BLOCK_PTR_DATA, LiteralShape.STRING),
    "substack": (NodeKind.SUBSTACK_DATA, LiteralShape.STRING),
    "double": (NodeKind.DOUBLE_DATA, LiteralShape.NUMBER),
    "pos_double": (NodeKind.POS_DOUBLE_DATA, LiteralShape.NUMBER),
    "pos_int": (NodeKind.POS_INT_DATA, LiteralShape.NUMBER),
    "int": (NodeKind.INT_DATA, LiteralShape.NUMBER),
    "angle": (NodeKind.ANGLE_DATA, LiteralShape.NUMBER),
    "color": (NodeKind.COLOR_DATA, LiteralShape.STRING),
    "string": (NodeKind.STRING_DATA, LiteralShape.STRING),
    "broadcast": (NodeKind.BROADCAST_DATA, LiteralShape.STRING),
    "variable": (NodeKind.VARIABLE_DATA, LiteralShape.STRING),
    "list": (NodeKind.LIST_DATA, LiteralShape.STRING),
}

_SPRITE_POSITION = {
    "x_pos": (NodeKind.X_POS, ValueKind.DOUBLE),
    "y_pos": (NodeKind.Y_POS, ValueKind.DOUBLE),
}

# Container kind -> {property keyword: (node kind, value kind)}
SECTION_SCHEMAS = {
    NodeKind.TARGET: {
        "is_stage": (NodeKind.IS_STAGE, ValueKind.BOOL),
        "costume_num": (NodeKind.COSTUME_NUM, ValueKind.POS_INT),
        "layer": (NodeKind.LAYER, ValueKind.POS_INT),
        "volume": (NodeKind.VOLUME, ValueKind.POS_DOUBLE),
        # Stage only
        "tempo": (NodeKind.TEMPO, ValueKind.POS_DOUBLE),
        "video_state": (NodeKind.VIDEO_STATE, ValueKind.STRING),
        "video_transparency": (NodeKind.VIDEO_TRANSPARENCY, ValueKind.POS_DOUBLE),
        "tts_language": (NodeKind.TTS_LANGUAGE, ValueKind.STRING_OR_NULL),
        # Sprite only
        "visible": (NodeKind.VISIBLE, ValueKind.BOOL),
        **_SPRITE_POSITION,
        "size": (NodeKind.SIZE, ValueKind.POS_DOUBLE),
        "direction": (NodeKind.DIRECTION, ValueKind.ANGLE),
        "rotation_style": (NodeKind.ROTATION_STYLE, ValueKind.STRING),
    },
    NodeKind.BLOCK: {
        "uid": (NodeKind.UID, ValueKind.STRING),
        "opcode": (NodeKind.OPCODE, ValueKind.STRING),
        "parent": (NodeKind.PARENT, ValueKind.BLOCK_PTR_OR_NULL),
        "next": (NodeKind.NEXT, ValueKind.BLOCK_PTR_OR_NULL),
        "input": (NodeKind.INPUT, ValueKind.TYPED_VALUES),
        "field": (NodeKind.FIELD, ValueKind.TYPED_VALUES),
        "mutation": (NodeKind.MUTATION, ValueKind.STRING),
        "shadow": (NodeKind.SHADOW, ValueKind.BOOL),
        "top_level": (NodeKind.TOP_LEVEL, ValueKind.BOOL),
        **_SPRITE_POSITION,
    },
    NodeKind.COSTUME: {
        "name": (NodeKind.NAME, ValueKind.STRING),
        "path": (NodeKind.PATH, ValueKind.STRING),
        "format": (NodeKind.FORMAT, ValueKind.STRING),
        "bitmap_res": (NodeKind.BITMAP_RES, ValueKind.POS_INT),
        "center_x": (NodeKind.CENTER_X, ValueKind.DOUBLE),
        "center_y": (NodeKind.CENTER_Y, ValueKind.DOUBLE),
    },
    NodeKind.SOUND: {
        "name": (NodeKind.NAME, ValueKind.STRING),
        "path": (NodeKind.PATH, ValueKind.STRING),
        "format": (NodeKind.FORMAT, ValueKind.STRING),
        "rate": (NodeKind.RATE, ValueKind.POS_INT),
        "samples": (NodeKind.SAMPLES, ValueKind.POS_INT),
    },
    NodeKind.VARIABLE: {
        "uid": (NodeKind.UID, ValueKind.STRING),
        "name": (NodeKind.NAME, ValueKind.STRING),
        "value": (NodeKind.VALUE, ValueKind.SCALAR),
        "is_cloud": (NodeKind.IS_CLOUD, ValueKind.BOOL),
    },
    NodeKind.LIST: {
        "uid": (NodeKind.UID, ValueKind.STRING),
        "name": (NodeKind.NAME, ValueKind.STRING),
        "item": (NodeKind.ITEM, ValueKind.SCALAR),
    },
    NodeKind.BROADCAST: {
        "uid": (NodeKind.UID, ValueKind.STRING),
        "name": (NodeKind.NAME, ValueKind.STRING),
    },
    NodeKind.MONITOR: {
        "uid": (NodeKind.UID, ValueKind.STRING),
        "mode": (NodeKind.MODE, ValueKind.STRING),
        "opcode": (NodeKind.OPCODE, ValueKind.STRING),
        "param": (NodeKind.PARAM, ValueKind.KEY_VALUE),
        "sprite_name": (NodeKind.SPRITE_NAME, ValueKind.STRING_OR_NULL),
        "value": (NodeKind.VALUE, ValueKind.SCALAR),
        "width": (NodeKind.WIDTH, ValueKind.POS_DOUBLE),
        "height": (NodeKind.HEIGHT, ValueKind.POS_DOUBLE),
        **_SPRITE_POSITION,
        "visible": (NodeKind.VISIBLE, ValueKind.BOOL),
        "slider_min": (NodeKind.SLIDER_MIN, ValueKind.DOUBLE),
        "slider_max": (NodeKind.SLIDER_MAX, ValueKind.DOUBLE),
        "is_discrete": (NodeKind.IS_DISCRETE, ValueKind.BOOL),
    },
}

# Sections that may open nested sections of their own.
NESTING_SECTIONS = {NodeKind.TARGET}

KEYWORDS = frozenset(
    set(METADATA_KEYWORDS)
    | set(SECTION_KEYWORDS)
    | set(TYPE_ANNOTATIONS)
    | {keyword for schema in SECTION_SCHEMAS.values() for keyword in schema}
)

PUNCTUATORS = frozenset({";", "end", "!end"})

BOOLEAN_LITERALS = frozenset({"true", "false"})
NULL_LITERAL = "null"

# Opening delimiter -> closing delimiter for literals the scanner keeps whole.
LITERAL_DELIMITERS = {'"': '"', "[": "]", "{": "}"}
