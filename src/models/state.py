"""
Program and frame state models plus pipeline helper

Defines ProgramState for the command line pipeline, FrameState for the
per-tick reveal pass, and the pipeline() helper that composes stages over
either of them.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Dict, List, Optional, Type, TypeVar, Callable, TYPE_CHECKING
from dataclasses import dataclass, field

# Forward references for type hints - avoid circular import
if TYPE_CHECKING:
    from ..lib.clear import ClearController
    from ..lib.reveal import RevealEngine
    from .events import RevealEvent


S = TypeVar("S")


@dataclass
class ProgramState:
    """
    Central state container for the command line pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, mode, outputSubdir
        - env_check: inputSourceFile, playbackOutputdir, envOK
        - source_parse: sourceText, parsedDocuments
        - reveal_playback: playbackResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the markup source
        outputdir: Base output directory
        verbosity: Logging verbosity level (1-3)
        inputFile: Markup filename (relative to inputdir)
        mode: Scroll mode for playback ("once" or "repeating")
        outputSubdir: Subdirectory within outputdir for output
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the markup file
        playbackOutputdir: Final output directory (outputdir + outputSubdir)
        sourceText: Markup read from inputSourceFile
        parsedDocuments: Documents built from sourceText, in source order
        playbackResult: Playback results (output_file, event_count, duration)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    mode: Optional[str] = field(default=None)
    outputSubdir: str = field(default=".")

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    playbackOutputdir: Path = field(default=Path("/"))
    sourceText: str = field(default="")
    parsedDocuments: Optional[List[Any]] = field(default=None)  # List[Document] at runtime
    playbackResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, mode, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for playback output

        Returns:
            ProgramState instance with all known CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Unknown CLI options (added by the plugin wrapper) are ignored
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self) -> "ProgramState":
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


@dataclass
class FrameState:
    """
    State carried through one reveal frame

    Stage order is fixed: input ingestion, reveal advance, clear
    evaluation, event collection.

    Attributes:
        delta: Seconds elapsed since the previous frame
        engines: Live reveal engines, in registration order
        controller: Clear controller shared by the engines
        interactions: Interact signals queued since the previous frame
        events: Events per engine, filled by the last stage
    """

    delta: float
    engines: List["RevealEngine"]
    controller: "ClearController"
    interactions: int = 0
    events: Dict["RevealEngine", List["RevealEvent"]] = field(default_factory=dict)

    def copy(self) -> "FrameState":
        return type(self)(**self.__dict__)


def pipeline(initial_state: S, *stages: Callable[[S], S]) -> S:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (state) -> state that receives the output of
    the previous stage and returns a new state.

    Args:
        initial_state: Starting state (ProgramState or FrameState)
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final state after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_parse,
            reveal_playback,
            results_report
        )

    This is equivalent to:
        results_report(reveal_playback(source_parse(env_check(initial_state))))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
