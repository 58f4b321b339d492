"""
Program state model and pipeline helper

Defines the ProgramState dataclass for the CLI's functional pipeline and
the pipeline() helper for composing transformation stages.
"""

import dataclasses
from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field
from functools import reduce


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the CLI pipeline (state bus pattern).

    Each stage receives a copy of the state and fills in the fields it is
    responsible for.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, entryUnit, outputFile,
          lenient, noWrap, flatten
        - env_check: entrySourceFile, zOutputdir, envOK
        - sources_load: fileSet
        - project_compile: compiledCode, flatSource
        - output_write: outputPath, flatPath
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the .z source units
        outputdir: Directory the compiled artifact is written to
        verbosity: Logging verbosity level (1-3)
        entryUnit: Entry unit filename (relative to inputdir)
        outputFile: Compiled artifact filename (relative to outputdir)
        lenient: Emit comments for unrecognized lines instead of failing
        noWrap: Do not wrap output in an immediately-invoked function
        flatten: Also write the bundled, macro-expanded Z source
        envOK: Environment validation passed
        entrySourceFile: Resolved path to the entry unit
        fileSet: Unit name -> unit text for every .z file in inputdir
        flatSource: Bundled and expanded Z text (only when flatten is set)
        compiledCode: Generated JavaScript
        outputPath: Path the compiled artifact was written to
        flatPath: Path the flattened source was written to
        compileResult: Summary (status, output_file, unit_count, line_count)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    entryUnit: Optional[str] = field(default=None)
    outputFile: Optional[str] = field(default=None)
    lenient: bool = field(default=False)
    noWrap: bool = field(default=False)
    flatten: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    entrySourceFile: Path = field(default=Path("/"))
    fileSet: Dict[str, str] = field(default_factory=dict)
    flatSource: Optional[str] = field(default=None)
    compiledCode: Optional[str] = field(default=None)
    outputPath: Optional[Path] = field(default=None)
    flatPath: Optional[Path] = field(default=None)
    compileResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Options that are not ProgramState fields are ignored.

        Args:
            options: Parsed CLI arguments (entryUnit, outputFile, etc.)
            inputdir: Directory containing source units
            outputdir: Directory for compilation output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in vars(options).items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            sources_load,
            project_compile,
            output_write,
            results_report
        )

    This is equivalent to:
        results_report(output_write(project_compile(sources_load(env_check(initial_state)))))
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
