"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

import dataclasses
from functools import reduce
from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the build pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the build progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, outputFile,
          tagName, baseUrl, target, strict
        - env_check: inputSourceFile, htmlOutputFile, manifestOutputFile, envOK
        - source_parse: parsedSource, instructions, diagnostics
        - document_write: writeResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the source HTML document
        outputdir: Directory for the rewritten document and manifest
        verbosity: Logging verbosity level (1-3)
        inputFile: Source document (relative to inputdir)
        outputFile: Rewritten document name (relative to outputdir), defaults
                    to inputFile
        tagName: Directive token override
        baseUrl: Destination base directory override
        target: Default build target override
        strict: Treat skipped asset tags as errors
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the source document
        htmlOutputFile: Resolved path of the rewritten document
        manifestOutputFile: Resolved path of the build manifest
        parsedSource: Rewritten document text
        instructions: BuildInstructions emitted while parsing
        diagnostics: Recoverable problems reported while parsing
        writeResult: Files written (output_file, manifest_file, counts)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    outputFile: Optional[str] = field(default=None)
    tagName: Optional[str] = field(default=None)
    baseUrl: Optional[str] = field(default=None)
    target: Optional[str] = field(default=None)
    strict: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    htmlOutputFile: Path = field(default=Path("/"))
    manifestOutputFile: Path = field(default=Path("/"))
    parsedSource: Optional[str] = field(default=None)
    instructions: List[Any] = field(default_factory=list)  # List[BuildInstruction]
    diagnostics: List[str] = field(default_factory=list)
    writeResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, tagName, etc.)
            inputdir: Directory containing the source document
            outputdir: Directory for build output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        # Only keep options that are ProgramState fields
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

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
            source_parse,
            document_write,
            results_report
        )

    This is equivalent to:
        results_report(document_write(source_parse(env_check(initial_state))))
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
