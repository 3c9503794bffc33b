"""
Defines the formal data structures (contracts) for the syntax tree produced by
the parser stage.

A tree is made of `Node` objects. Each node carries a `NodeData` (a closed
tagged variant: the `NodeKind` tag plus an optional payload string), its
ordered children and the source line of the token that introduced it.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from basm.exceptions import InternalCompilerError


class NodeKind(Enum):
    ROOT = "Root"

    # --- Metadata ---
    SEM_VER = "SemVer"
    VM = "VM"
    AGENT = "Agent"

    # --- Containers ---
    TARGET = "Target"
    MONITOR = "Monitor"
    BLOCK = "Block"
    COSTUME = "Costume"
    SOUND = "Sound"
    VARIABLE = "Variable"
    LIST = "List"
    BROADCAST = "Broadcast"

    # --- Targets ---
    IS_STAGE = "IsStage"
    COSTUME_NUM = "CostumeNum"
    LAYER = "Layer"
    VOLUME = "Volume"

    # --- Targets (stage) ---
    TEMPO = "Tempo"
    VIDEO_STATE = "VideoState"
    VIDEO_TRANSPARENCY = "VideoTransparency"
    TTS_LANGUAGE = "TTSLanguage"

    # --- Targets (sprite) ---
    VISIBLE = "Visible"
    X_POS = "XPos"
    Y_POS = "YPos"
    SIZE = "Size"
    DIRECTION = "Direction"
    ROTATION_STYLE = "RotationStyle"

    # --- Blocks ---
    UID = "Uid"
    OPCODE = "Opcode"
    PARENT = "Parent"
    NEXT = "Next"
    INPUT = "Input"
    FIELD = "Field"
    MUTATION = "Mutation"
    SHADOW = "Shadow"
    TOP_LEVEL = "TopLevel"

    # --- Costumes & sounds ---
    NAME = "Name"
    PATH = "Path"
    FORMAT = "Format"
    BITMAP_RES = "BitmapRes"
    CENTER_X = "CenterX"
    CENTER_Y = "CenterY"
    RATE = "Rate"
    SAMPLES = "Samples"

    # --- Variables & lists ---
    VALUE = "Value"
    IS_CLOUD = "IsCloud"
    ITEM = "Item"

    # --- Monitors ---
    MODE = "Mode"
    PARAM = "Param"
    SPRITE_NAME = "SpriteName"
    WIDTH = "Width"
    HEIGHT = "Height"
    SLIDER_MIN = "SliderMin"
    SLIDER_MAX = "SliderMax"
    IS_DISCRETE = "IsDiscrete"

    # --- Leaf data ---
    PROTOTYPE_DATA = "PrototypeData"
    BLOCK_PTR_DATA = "BlockPtrData"
    SUBSTACK_DATA = "SubstackData"
    DOUBLE_DATA = "DoubleData"
    POS_DOUBLE_DATA = "PosDoubleData"
    POS_INT_DATA = "PosIntData"
    INT_DATA = "IntData"
    ANGLE_DATA = "AngleData"
    COLOR_DATA = "ColorData"
    STRING_DATA = "StringData"
    BROADCAST_DATA = "BroadcastData"
    VARIABLE_DATA = "VariableData"
    LIST_DATA = "ListData"
    BOOL_DATA = "BoolData"
    NULL_DATA = "NullData"

    @property
    def is_leaf(self) -> bool:
        return self in LEAF_KINDS

    @property
    def carries_payload(self) -> bool:
        return self in LEAF_KINDS and self is not NodeKind.NULL_DATA


LEAF_KINDS = frozenset(
    {
        NodeKind.PROTOTYPE_DATA,
        NodeKind.BLOCK_PTR_DATA,
        NodeKind.SUBSTACK_DATA,
        NodeKind.DOUBLE_DATA,
        NodeKind.POS_DOUBLE_DATA,
        NodeKind.POS_INT_DATA,
        NodeKind.INT_DATA,
        NodeKind.ANGLE_DATA,
        NodeKind.COLOR_DATA,
        NodeKind.STRING_DATA,
        NodeKind.BROADCAST_DATA,
        NodeKind.VARIABLE_DATA,
        NodeKind.LIST_DATA,
        NodeKind.BOOL_DATA,
        NodeKind.NULL_DATA,
    }
)


class NodeData(BaseModel):
    """The tag of a node plus, for leaf-data kinds, its parsed payload."""

    model_config = ConfigDict(frozen=True)

    kind: NodeKind
    value: Optional[str] = None

    @model_validator(mode="after")
    def _check_payload(self) -> "NodeData":
        if self.kind.carries_payload and self.value is None:
            raise ValueError(f"{self.kind.value} requires a payload")
        if not self.kind.carries_payload and self.value is not None:
            raise ValueError(f"{self.kind.value} does not carry a payload")
        return self


class Node(BaseModel):
    data: NodeData
    children: List["Node"] = []
    line: int

    @model_validator(mode="after")
    def _check_leaf(self) -> "Node":
        if self.data.kind.is_leaf and self.children:
            raise ValueError(f"{self.data.kind.value} nodes cannot have children")
        return self

    @property
    def kind(self) -> NodeKind:
        return self.data.kind

    def append(self, child: "Node") -> "Node":
        if self.data.kind.is_leaf:
            raise InternalCompilerError(f"Cannot attach children to a {self.data.kind.value} leaf (line {self.line}).")
        self.children.append(child)
        return child


def make_node(kind: NodeKind, line: int) -> Node:
    return Node(data=NodeData(kind=kind), line=line)


def make_leaf(kind: NodeKind, value: Optional[str], line: int) -> Node:
    return Node(data=NodeData(kind=kind, value=value), line=line)
