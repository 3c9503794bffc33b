import json
import os
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel

from basm.lexer.classifier import classify_all
from basm.lexer.scanner import scan
from basm.parser.core.classes import Node
from basm.parser.core.parser import parse

from .exceptions import BlockAsmError, Diagnostic, Stage
from .utils import CompilerArtifactEncoder

# Artifact name -> stage that produces it, in pipeline order.
STAGES = {
    "symbols": (Stage.SCAN, scan),
    "tokens": (Stage.CLASSIFY, classify_all),
    "tree": (Stage.PARSE, parse),
}


class PipelineResult(BaseModel):
    """What the front end hands to its caller: a tree, or the diagnostics of the stage that failed."""

    tree: Optional[Node] = None
    diagnostics: List[Diagnostic] = []
    failed_stage: Optional[Stage] = None

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def unwrap(self) -> Node:
        if self.failed_stage is not None:
            raise BlockAsmError(self.failed_stage, self.diagnostics)
        return self.tree


class CompilationPipeline:
    """
    Orchestrates the front end from source text to syntax tree.
    Each stage runs over its whole input and collects every diagnostic it
    finds; the next stage only runs when the previous one reported nothing.
    """

    def __init__(
        self,
        source_content: str,
        file_path: Optional[str] = None,
        dump_stages: Optional[List[str]] = None,
        stop_after_stage: Optional[str] = None,
    ):
        self.source_content = source_content
        self.file_path = os.path.abspath(file_path) if file_path else "<stdin>"
        self.dump_stages = dump_stages or []
        self.stop_after_stage = stop_after_stage

        requested = set(self.dump_stages)
        if stop_after_stage is not None:
            requested.add(stop_after_stage)
        unknown = sorted(requested - STAGES.keys())
        if unknown:
            raise ValueError(f"Unknown pipeline stage(s): {', '.join(unknown)}. Valid stages are: {', '.join(STAGES)}.")
        self.artifacts: Dict[str, Any] = {}
        self.results: List[Any] = []
        self.failed_stage: Optional[Stage] = None
        self.diagnostics: List[Diagnostic] = []

    def run(self) -> Any:
        """
        Executes the pipeline stage by stage.
        Returns the artifact of the last stage that ran, or None if a stage failed.
        """
        artifact: Any = self.source_content
        for name, (stage, func) in STAGES.items():
            artifact = self._run_stage(name, stage, func, artifact)
            if self.failed_stage is not None or self.stop_after_stage == name:
                break

        return None if self.failed_stage is not None else self.results[-1]

    def _run_stage(self, name: str, stage: Stage, func: Callable, artifact: Any) -> Any:
        """Runs a single stage, storing its output and diagnostics."""
        result, diagnostics = func(artifact)
        if diagnostics:
            self.failed_stage = stage
            self.diagnostics = diagnostics
            return None

        self.artifacts[name] = result
        self.results.append(result)
        if name in self.dump_stages:
            self.save_artifact(name, result)
        return result

    def save_artifact(self, name: str, data: Any, output_path: Optional[str] = None) -> str:
        """Saves an intermediate artifact to a JSON file next to the source by default."""
        if output_path is None:
            if self.file_path == "<stdin>":
                base_name = "stdin_output"
            else:
                base_name = os.path.splitext(self.file_path)[0]
            output_path = f"{base_name}.{name}.json"

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=False, cls=CompilerArtifactEncoder)
        return output_path


def run_pipeline(source: str) -> PipelineResult:
    """Scans, classifies and parses `source`, stopping at the first stage that reports diagnostics."""
    pipeline = CompilationPipeline(source)
    tree = pipeline.run()
    return PipelineResult(tree=tree, diagnostics=pipeline.diagnostics, failed_stage=pipeline.failed_stage)


def compile_blockasm(
    source: str,
    file_path: Optional[str] = None,
    dump_stages: Optional[List[str]] = None,
    stop_after_stage: Optional[str] = None,
):
    """High-level entry point for the compilation pipeline."""
    pipeline = CompilationPipeline(source, file_path, dump_stages, stop_after_stage)
    final_product = pipeline.run()
    if pipeline.failed_stage is not None:
        raise BlockAsmError(pipeline.failed_stage, pipeline.diagnostics)
    return final_product
