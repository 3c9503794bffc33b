import argparse
import os
import sys
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .compiler import CompilationPipeline
from .config.config import BASM_VERSION, TARGET_SCRATCH_VERSION
from .exceptions import BlockAsmError, ErrorCode, Stage, diagnostic
from .utils import TerminalColors


class OutputType(Enum):
    CHECK = "check"
    LEXED = "tokens"
    PARSED = "tree"


@dataclass
class CompileOptions:
    source_path: str
    output_name: Optional[str] = None
    verbose: bool = False
    output_type: OutputType = OutputType.CHECK


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="basm", description="Compile a Block-ASM source file.")
    parser.add_argument("source", nargs="?", default=None, help="The path to the Block-ASM source file.")
    parser.add_argument("-o", dest="output_name", help="The name of the output file.")
    parser.add_argument("--version", action="store_true", help="Print the Block-ASM version and the targeted Scratch version.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print more data during compilation.")
    parser.add_argument("-L", dest="lexed", action="store_true", help="Output the classified token sequence.")
    parser.add_argument("-P", dest="parsed", action="store_true", help="Output the parsed syntax tree.")
    parser.add_argument("--lsp", action="store_true", help="Start the diagnostics language server on stdio.")
    return parser


def resolve_options(args: argparse.Namespace, unknown: List[str]) -> CompileOptions:
    """Checks the parsed arguments, collecting every problem before giving up."""
    diagnostics = [diagnostic(ErrorCode.UNKNOWN_TERMINAL_ARGUMENT, arg=arg) for arg in unknown]

    if args.lexed and args.parsed:
        diagnostics.append(diagnostic(ErrorCode.UNDETERMINED_OUTPUT_TYPE))

    source_path = None
    if args.source is None:
        diagnostics.append(diagnostic(ErrorCode.MISSING_SOURCE))
    else:
        source_path = os.path.realpath(os.path.join(os.getcwd(), args.source))
        if not os.path.isfile(source_path):
            diagnostics.append(diagnostic(ErrorCode.SOURCE_NOT_FOUND, path=source_path))

    if diagnostics:
        raise BlockAsmError(Stage.ARGUMENTS, diagnostics)

    output_type = OutputType.CHECK
    if args.lexed:
        output_type = OutputType.LEXED
    elif args.parsed:
        output_type = OutputType.PARSED

    return CompileOptions(source_path=source_path, output_name=args.output_name, verbose=args.verbose, output_type=output_type)


def read_source(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError):
        raise BlockAsmError(Stage.ARGUMENTS, [diagnostic(ErrorCode.CANNOT_READ_SOURCE, path=path)])


def run(options: CompileOptions) -> Optional[str]:
    """Runs the front end for the given options and returns the written artifact path, if any."""
    source = read_source(options.source_path)

    stop_after_stage = None
    if options.output_type is not OutputType.CHECK:
        stop_after_stage = options.output_type.value

    pipeline = CompilationPipeline(source, options.source_path, stop_after_stage=stop_after_stage)
    final_product = pipeline.run()
    if pipeline.failed_stage is not None:
        raise BlockAsmError(pipeline.failed_stage, pipeline.diagnostics)

    if options.verbose:
        for name, artifact in pipeline.artifacts.items():
            count = len(artifact) if isinstance(artifact, list) else len(artifact.children)
            print(f"{TerminalColors.CYAN}Stage '{name}' produced {count} item(s){TerminalColors.RESET}")

    if options.output_type is OutputType.CHECK:
        return None

    output_path = os.path.abspath(options.output_name) if options.output_name else None
    return pipeline.save_artifact(options.output_type.value, final_product, output_path)


def main(argv: Optional[List[str]] = None) -> int:
    start_time = time.perf_counter()

    parser = build_arg_parser()
    args, unknown = parser.parse_known_args(argv)

    if args.version:
        print(f"Block-ASM {BASM_VERSION} (targets Scratch {TARGET_SCRATCH_VERSION})")
        return 0

    if args.lsp:
        from .server import start_server

        start_server()
        return 0

    try:
        options = resolve_options(args, unknown)
        if options.verbose:
            print(f"--- Compiling {options.source_path} ---")

        output_path = run(options)

        print(f"{TerminalColors.GREEN}--- Compilation Successful ---{TerminalColors.RESET}")
        if output_path:
            print(f"Output written to {output_path}")

    # --- Error Handling ---
    except BlockAsmError as e:
        for d in e.diagnostics:
            print(f"{TerminalColors.RED}{d.message}{TerminalColors.RESET}", file=sys.stderr)
        return 1

    finally:
        if args.verbose:
            duration = time.perf_counter() - start_time
            print(f"{TerminalColors.CYAN}--- Total Execution Time: {duration:.4f} seconds ---{TerminalColors.RESET}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
