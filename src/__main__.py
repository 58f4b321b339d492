#!/usr/bin/env python3
"""
zlang - Z notation to JavaScript compiler

Compiles a directory of Z source units into one standalone JavaScript file.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Philosophy:
    - One line, one directive: no expression grammar, arguments are
      copied into the generated code as written
    - Units are plain text files; imports are resolved inside the input
      directory only
    - Macros are textual templates expanded before compilation

Usage:
    zlang inputdir/ outputdir/ --entryUnit main.z

    The compiled program is written to outputdir/ as zlang_output.js.

Examples:
    # Basic compilation
    zlang src/ build/

    # Keep going on unknown lines, emitting them as comments
    zlang src/ build/ --lenient

    # Also write the bundled, macro-expanded source for inspection
    zlang src/ build/ --flatten -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from pygments import highlight
from pygments.formatters import TerminalFormatter

from .config import appsettings
from .lib import (
    compile_project,
    project_flatten,
    ZLangError,
    UnrecognizedDirective,
    __version__,
    LOG,
    state_connectToLogger,
)
from .lib.lexer import ZLexer
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
       _
   ___| | __ _ _ __   __ _
  |_  / |/ _` | '_ \ / _` |
   / /| | (_| | | | | (_| |
  /___|_|\__,_|_| |_|\__, |
                     |___/
  Z notation to JavaScript compiler
"""

# Define CLI arguments
parser = ArgumentParser(
    description="zlang - compile Z source units to JavaScript",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--entryUnit",
    default=appsettings.entry_unit,
    type=str,
    help="Unit compilation starts from (relative to inputdir)",
)

parser.add_argument(
    "--outputFile",
    default=appsettings.output_filename,
    type=str,
    help="Name of the compiled JavaScript file (relative to outputdir)",
)

parser.add_argument(
    "--lenient",
    action="store_true",
    default=False,
    help="Emit unrecognized lines as comments instead of failing",
)

parser.add_argument(
    "--noWrap",
    action="store_true",
    default=False,
    help="Do not wrap the program in an immediately-invoked function",
)

parser.add_argument(
    "--flatten",
    action="store_true",
    default=False,
    help="Also write the bundled, macro-expanded Z source next to the output",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - entrySourceFile: Resolved path to the entry unit
            - envOK: True if environment is valid

    Exits:
        1 if inputdir or the entry unit does not exist
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if not state.entryUnit:
        state.entryUnit = appsettings.entry_unit
    if not state.outputFile:
        state.outputFile = appsettings.output_filename

    if state.inputdir is None or not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    # same lookup order as imports: exact name, then with or without extension
    for candidate in appsettings.unitName_candidates(state.entryUnit):
        entry_file = state.inputdir / candidate
        if entry_file.is_file():
            state.entryUnit = candidate
            break
    else:
        print(f"Error: Entry unit not found: {state.inputdir / state.entryUnit}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.entrySourceFile = entry_file
    LOG(f"Entry unit: {entry_file}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def sources_load(inputstate: ProgramState) -> ProgramState:
    """
    Read every Z unit below inputdir into the file set.

    Units are keyed by their path relative to inputdir, using forward
    slashes, so imports like <import^z="lib/util.z"> resolve.

    Returns:
        ProgramState with added field:
            - fileSet: Dict[str, str] of unit name -> text

    Exits:
        1 if a unit cannot be read
    """
    state = inputstate.copy()

    LOG("Reading source units...", level=1)

    file_set = {}
    for path in sorted(state.inputdir.rglob("*")):
        if not path.is_file() or not appsettings.unitName_isSource(path.name):
            continue
        name = path.relative_to(state.inputdir).as_posix()
        try:
            file_set[name] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading unit {name}: {e}", file=sys.stderr)
            sys.exit(1)
        LOG(f"Read {len(file_set[name])} characters from {name}", level=3)

    LOG(f"Loaded {len(file_set)} units", level=2)
    state.fileSet = file_set
    return state


def error_report(error: ZLangError) -> None:
    """Print a compilation error, highlighting the offending line when known"""
    print(f"Compilation error: {error}", file=sys.stderr)
    if isinstance(error, UnrecognizedDirective):
        print("  " + highlight(error.text, ZLexer(), TerminalFormatter()).rstrip("\n"), file=sys.stderr)


def project_compile(inputstate: ProgramState) -> ProgramState:
    """
    Compile the loaded file set to JavaScript.

    Returns:
        ProgramState with added fields:
            - compiledCode: Generated JavaScript
            - flatSource: Bundled and expanded Z text (if --flatten)

    Exits:
        1 on any compilation error
    """
    state = inputstate.copy()

    LOG(f"Compiling {state.entryUnit}...", level=1)

    settings = appsettings.model_copy(
        update={
            "strict_mode": appsettings.strict_mode and not state.lenient,
            "wrap_output": appsettings.wrap_output and not state.noWrap,
        }
    )

    try:
        state.compiledCode = compile_project(state.entryUnit, state.fileSet, settings)
        if state.flatten:
            state.flatSource = project_flatten(state.entryUnit, state.fileSet, settings)
    except ZLangError as e:
        error_report(e)
        sys.exit(1)

    return state


def output_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the compiled program (and optional flat source) to outputdir.

    Returns:
        ProgramState with added fields:
            - outputPath, flatPath
            - compileResult: status, output_file, unit_count, line_count
    """
    state = inputstate.copy()

    if state.compiledCode is None:
        print("Error: No compiled code available", file=sys.stderr)
        sys.exit(1)

    state.outputPath = state.outputdir / state.outputFile
    state.outputPath.write_text(state.compiledCode, encoding="utf-8")
    LOG(f"Wrote {state.outputPath}", level=2)

    if state.flatSource is not None:
        state.flatPath = state.outputdir / (Path(state.entryUnit).stem + ".flat" + appsettings.unit_extension)
        state.flatPath.write_text(state.flatSource + "\n", encoding="utf-8")
        LOG(f"Wrote {state.flatPath}", level=2)

    state.compileResult = {
        "status": True,
        "output_file": str(state.outputPath),
        "unit_count": len(state.fileSet),
        "line_count": state.compiledCode.count("\n"),
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display compilation results.

    Returns:
        ProgramState unchanged (terminal pipeline stage)
    """
    state: ProgramState = inputstate.copy()
    if not state.compileResult:
        print("Error: Compilation failed", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Compilation successful!", level=1)
    LOG(f"  Output: {state.compileResult['output_file']}", level=1)
    LOG(f"  Units:  {state.compileResult['unit_count']}", level=1)
    LOG(f"  Lines:  {state.compileResult['line_count']}", level=1)
    LOG("\nTo run:", level=1)
    LOG(f"  node {state.outputPath}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="zlang - Z notation to JavaScript compiler",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - compile a Z project to JavaScript.

    Orchestrates the full pipeline:
        1. env_check: Validate paths and environment
        2. sources_load: Read every .z unit (the file set)
        3. project_compile: Bundle, expand macros, compile
        4. output_write: Write the compiled program
        5. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing Z source units
        outputdir: Directory where the compiled program will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, sources_load, project_compile, output_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
