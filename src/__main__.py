#!/usr/bin/env python3
"""
revealtext - Markup parser and typewriter reveal engine

Reads a revealtext markup file, builds its Documents and plays them back
offline through the reveal engine, writing a transcript of every reveal
event with simulated timestamps plus a highlighted preview of the source.

The command line follows the ChRIS "plugin" pattern: an input directory,
an output directory and options.

Markup:
    <0.5>               relative reveal speed
    [1.5]               pause in seconds
    `text|red`[wave]    span with colour (red, green, blue) and effect (wave, shake)
    {...}               closure block (played back as its own Document)

Usage:
    revealtext inputdir/ outputdir/ --inputFile dialogue.rt

Examples:
    # Basic playback
    revealtext . output/ --inputFile dialogue.rt

    # Repeating mode into a subdirectory, verbose
    revealtext . output/ --inputFile banner.rt --mode repeating --outputSubdir banner/ -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import Playback, parse_text, parse_with_handlers, __version__, LOG, state_connectToLogger
from .lib.errors import BuildError, ParseError
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
                          _ _            _
   _ __ _____   _____  __ _| | |_ _____  _| |_
  | '__/ _ \ \ / / _ \/ _` | | __/ _ \ \/ / __|
  | | |  __/\ V /  __/ (_| | | ||  __/>  <| |_
  |_|  \___| \_/ \___|\__,_|_|\__\___/_/\_\\__|

  Typewriter reveal for styled markup
"""

# Define CLI arguments
parser = ArgumentParser(
    description="revealtext - play back revealtext markup through the typewriter engine",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input markup file (relative to inputdir)"
)

parser.add_argument(
    "--mode",
    default=None,
    choices=["once", "repeating"],
    help="Scroll mode for playback. Defaults to REVEALTEXT_DEFAULT_MODE",
)

parser.add_argument(
    "--outputSubdir",
    default=".",
    type=str,
    help="Subdirectory within outputdir for the transcript",
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
            - inputSourceFile: Resolved path to the markup file
            - playbackOutputdir: Created output directory path
            - envOK: True if environment is valid

    Exits:
        1 if the input file is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.playbackOutputdir = state.outputdir / state.outputSubdir
    state.playbackOutputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.playbackOutputdir}", level=2)

    state.envOK = True
    return state


def source_parse(inputstate: ProgramState) -> ProgramState:
    """
    Read the markup file and build its Documents.

    Every closure is bound to an identity handler, so its Document is played
    back in place.

    Args:
        inputstate: Program state with inputSourceFile path set

    Returns:
        ProgramState with added fields:
            - sourceText: Raw markup
            - parsedDocuments: List[Document] in source order

    Exits:
        1 if file read fails or the markup does not build
    """

    state = inputstate.copy()

    LOG("Reading source file...", level=1)

    try:
        state.sourceText = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(state.sourceText)} characters from {state.inputSourceFile.name}", level=2)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    # Markup files end with a newline that is not part of the text
    source = state.sourceText.rstrip("\n")

    LOG("Building documents...", level=1)
    try:
        closures = parse_text(source).closure_count
        state.parsedDocuments = list(
            parse_with_handlers(source, [lambda document: document] * closures)
        )
        LOG(f"Built {len(state.parsedDocuments)} documents ({closures} closures)", level=2)
    except (ParseError, BuildError) as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)
    return state


def reveal_playback(inputstate: ProgramState) -> ProgramState:
    """
    Play the Documents back and write the transcript.

    Args:
        inputstate: Program state with parsedDocuments

    Returns:
        ProgramState with added field:
            - playbackResult: Dict containing status, output_file,
              segment_count, event_count, duration, completed

    Exits:
        1 if parsedDocuments is None or playback fails
    """

    state = inputstate.copy()

    LOG("Playing back documents...", level=1)

    if state.parsedDocuments is None:
        print("Error: No parsed documents available", file=sys.stderr)
        sys.exit(1)

    try:
        playback = Playback(
            documents=state.parsedDocuments,
            output_dir=state.playbackOutputdir,
            source=state.sourceText,
            mode=state.mode,
        )
        state.playbackResult = playback.run()
        LOG(f"Playback complete: {state.playbackResult['event_count']} events", level=2)
    except Exception as e:
        print(f"Playback error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display playback results to user.

    Args:
        inputstate: Program state with playbackResult populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if playbackResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.playbackResult:
        print("Error: Playback failed", file=sys.stderr)
        sys.exit(1)

    if state.verbosity >= 1:
        LOG("\n✓ Playback successful!", level=1)
        LOG(f"  Transcript: {state.playbackResult['output_file']}", level=1)
        LOG(f"  Documents:  {state.playbackResult['segment_count']}", level=1)
        LOG(f"  Events:     {state.playbackResult['event_count']}", level=1)
        LOG(f"  Duration:   {state.playbackResult['duration']}s (simulated)", level=1)
        if not state.playbackResult["completed"]:
            LOG("  Stopped at the playback limit", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="revealtext - typewriter playback for styled markup",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - play back a markup file and write its transcript.

    Orchestrates the full pipeline:
        1. env_check: Validate paths and environment
        2. source_parse: Read markup and build Documents
        3. reveal_playback: Reveal Documents offline, write outputs
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
            - inputFile: str - Input markup filename
            - mode: Optional[str] - Scroll mode
            - outputSubdir: str - Output subdirectory name
            - verbosity: int - Logging verbosity level (1-3)
        inputdir: Directory containing markup files
        outputdir: Directory where the transcript will be written
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Debug mode forces trace output
    if appsettings.debug_mode:
        state.verbosity = max(state.verbosity, 3)

    state_connectToLogger(state)

    pipeline(state, env_check, source_parse, reveal_playback, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
