#!/usr/bin/env python3
"""
htmlblocks - Directive-driven HTML build preprocessor

Rewrites a developer-authored HTML template that references many individual
scripts and stylesheets into a production document that references a few
aggregated assets, and writes the build instructions (what to bundle, minify
or compile, and where) to a YAML manifest for the asset toolchain.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Directives:
    <!--build:js js/app.min.js-->
        <script src="js/a.js"></script>
        <script src="js/b.js"></script>
    <!--endbuild-->

    <!--build:less css/site.css-->
        <link rel="stylesheet" type="text/css" href="css/site.less">
    <!--endbuild-->

    <!--build:requirejs js/app/-->

    <!--build:uncomment-->
        <!-- <script src="analytics.js"></script> -->
    <!--endbuild-->

Usage:
    htmlblocks inputdir/ outputdir/ --inputFile index.html

Examples:
    # Rewrite index.html, bundle destinations under outputdir/
    htmlblocks src/ dist/ --inputFile index.html

    # Custom directive token and release target, fail on any skipped tag
    htmlblocks src/ dist/ --inputFile index.html --tagName prod --target release --strict

    # Verbose output
    htmlblocks src/ dist/ --inputFile index.html -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

import yaml
from chris_plugin import chris_plugin

from .config import appsettings
from .lib import BlockParser, BlockError, __version__, LOG, state_connectToLogger
from .models import ProgramState, pipeline
from .models.events import instructions_group


DISPLAY_TITLE = r"""
  _     _             _ _     _            _
 | |__ | |_ _ __ ___ | | |__ | | ___   ___| | _____
 | '_ \| __| '_ ` _ \| | '_ \| |/ _ \ / __| |/ / __|
 | | | | |_| | | | | | | |_) | | (_) | (__|   <\__ \
 |_| |_|\__|_| |_| |_|_|_.__/|_|\___/ \___|_|\_\___/

  Directive-driven HTML build preprocessor
"""

# Define CLI arguments
parser = ArgumentParser(
    description="htmlblocks - rewrite <!--build:...--> blocks and emit asset build instructions",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input HTML document (relative to inputdir)"
)

parser.add_argument(
    "--outputFile",
    default=None,
    type=str,
    help="Rewritten HTML document (relative to outputdir). Defaults to the input file name",
)

parser.add_argument(
    "--tagName",
    default=None,
    type=str,
    help=f"Directive token. Defaults to '{appsettings.tag_name}'",
)

parser.add_argument(
    "--baseUrl",
    default=None,
    type=str,
    help="Base directory for bundle destinations. Defaults to outputdir",
)

parser.add_argument(
    "--target",
    default=None,
    type=str,
    help=f"Default build target. Defaults to '{appsettings.target}'",
)

parser.add_argument(
    "--strict",
    action="store_true",
    default=False,
    help="Fail on asset tags that would otherwise be skipped",
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
    Validate environment and resolve all file paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the input document
            - htmlOutputFile: Resolved path of the rewritten document
            - manifestOutputFile: Resolved path of the build manifest
            - envOK: True if environment is valid

    Exits:
        1 if the input document is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.htmlOutputFile = state.outputdir / (state.outputFile or state.inputFile)
    state.htmlOutputFile.parent.mkdir(parents=True, exist_ok=True)
    LOG(f"Output file: {state.htmlOutputFile}", level=2)

    state.manifestOutputFile = state.outputdir / appsettings.manifest_file
    LOG(f"Manifest file: {state.manifestOutputFile}", level=2)

    state.envOK = True
    return state


def settings_fromState(state: ProgramState):
    """AppSettings for one run: CLI overrides on top of the environment"""
    overrides = {
        "base_url": state.baseUrl or str(state.outputdir),
        "source_root": str(state.inputdir),
        "strict_mode": state.strict or appsettings.strict_mode,
    }
    if state.tagName:
        overrides["tag_name"] = state.tagName
    if state.target:
        overrides["target"] = state.target
    return appsettings.model_copy(update=overrides)


def source_parse(inputstate: ProgramState) -> ProgramState:
    """
    Read the input document and rewrite its directive blocks.

    Args:
        inputstate: Program state with inputSourceFile path set

    Returns:
        ProgramState with added fields:
            - parsedSource: Rewritten document text
            - instructions: BuildInstructions emitted by the handlers
            - diagnostics: Skipped asset tags

    Exits:
        1 if the file cannot be read or a block cannot be resolved
    """

    state = inputstate.copy()

    LOG("Reading source file...", level=1)

    try:
        source = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(source)} characters from {state.inputSourceFile.name}", level=2)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG("Resolving directive blocks...", level=1)
    try:
        block_parser = BlockParser(source, settings=settings_fromState(state))
        state.parsedSource = block_parser.parse()
        state.instructions = list(block_parser.instructions)
        state.diagnostics = list(block_parser.diagnostics)
        LOG(f"Emitted {len(state.instructions)} build instructions", level=2)
    except BlockError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)
    return state


def manifest_build(state: ProgramState) -> dict:
    """
    Group instructions by tool and target for the manifest

    Example:
        {"source": "index.html", "output": "index.html",
         "instructions": {"uglify": {"dist": [{"src": "js/a.js", "dest": "dist/app.js"}]}}}
    """
    return {
        "source": str(state.inputFile),
        "output": str(state.outputFile or state.inputFile),
        "instructions": instructions_group(state.instructions),
    }


def document_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the rewritten document and the build manifest.

    Args:
        inputstate: Program state with parsedSource and instructions

    Returns:
        ProgramState with added field:
            - writeResult: Dict containing:
                - status: bool
                - output_file: str
                - manifest_file: str
                - instruction_count: int
                - skipped_count: int

    Exits:
        1 if parsedSource is None or a file cannot be written
    """

    state = inputstate.copy()

    if state.parsedSource is None:
        print("Error: No parsed source available", file=sys.stderr)
        sys.exit(1)

    LOG("Writing output...", level=1)

    try:
        state.htmlOutputFile.write_text(state.parsedSource, encoding="utf-8")
        LOG(f"Wrote {state.htmlOutputFile}", level=2)

        with open(state.manifestOutputFile, "w", encoding="utf-8") as f:
            yaml.safe_dump(manifest_build(state), f, sort_keys=False, default_flow_style=False)
        LOG(f"Wrote {state.manifestOutputFile}", level=2)
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        sys.exit(1)

    state.writeResult = {
        "status": True,
        "output_file": str(state.htmlOutputFile),
        "manifest_file": str(state.manifestOutputFile),
        "instruction_count": len(state.instructions),
        "skipped_count": len(state.diagnostics),
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display build results to user.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if writeResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.writeResult:
        print("Error: Build failed", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Rewrite successful!", level=1)
    LOG(f"  Output: {state.writeResult['output_file']}", level=1)
    LOG(f"  Manifest: {state.writeResult['manifest_file']}", level=1)
    LOG(f"  Instructions: {state.writeResult['instruction_count']}", level=1)
    if state.writeResult["skipped_count"]:
        LOG(f"  Skipped tags: {state.writeResult['skipped_count']}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="htmlblocks - Directive-driven HTML build preprocessor",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - rewrite an HTML template and emit its build manifest.

    Orchestrates the pipeline:
        1. env_check: Validate paths
        2. source_parse: Read the document and resolve its blocks
        3. document_write: Write the document and the YAML manifest
        4. results_report: Display results to user

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )
    if appsettings.debug_mode:
        state.verbosity = max(state.verbosity, 3)

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, source_parse, document_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
