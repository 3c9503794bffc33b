"""
Utility helpers for the Block-ASM compiler: terminal coloring and a JSON
artifact serializer.
"""

import json
from enum import Enum

from pydantic import BaseModel


class TerminalColors:
    RED = "\033[91m"
    GREEN = "\033[92m"
    CYAN = "\033[96m"
    RESET = "\033[0m"


class CompilerArtifactEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, BaseModel):
            return o.model_dump(mode="json")
        if isinstance(o, Enum):
            return o.value
        return super().default(o)
