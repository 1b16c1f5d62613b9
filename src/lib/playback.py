"""
Offline playback of revealtext Documents

Drives a reveal engine through a sequence of Documents with a fixed frame
delta, answering every await-clear gate with a simulated interact, and
records what a renderer or audio system would have observed.

Outputs (written to the output directory):
- transcript.json: one entry per reveal event, with simulated time
- source.html: syntax-highlighted markup (when source text is given)
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from pygments import highlight
from pygments.formatters import HtmlFormatter

from ..config import appsettings
from ..models.document import Document, ParsedText
from ..models.events import CharacterRevealed, Cleared, WordRevealed, event_name
from .frame import Frame
from .lexer import RevealTextLexer
from .log import LOG
from .reveal import RevealEngine, RevealStatus, ScrollMode


@dataclass
class TranscriptEntry:
    """
    One recorded reveal event

    Attributes:
        time: Simulated seconds since playback started
        segment: Index of the Document being revealed
        event: Event name (character_revealed, word_revealed, ...)
        index: Character index for character/word events
        character: Revealed character for character events
    """
    time: float
    segment: int
    event: str
    index: Optional[int] = None
    character: Optional[str] = None


class Playback:
    """
    Simulates revealing Documents and writes a transcript

    Responsibilities:
    - Bind each Document in turn to one engine inside a Frame
    - Step frames at a fixed delta, interacting at await-clear gates
    - Record events with simulated timestamps
    - Write transcript.json and source.html
    """

    def __init__(
        self,
        documents: Union[ParsedText, Sequence[Document]],
        output_dir: Union[str, Path],
        source: str = "",
        mode: Union[ScrollMode, str, None] = None,
        base_period: Optional[float] = None,
        step: Optional[float] = None,
        limit: Optional[float] = None,
        interact_delay: Optional[float] = None,
    ) -> None:
        """
        Initialize playback

        Args:
            documents: Documents to reveal, in order, or a ParsedText
            output_dir: Directory for transcript.json and source.html
            source: Markup source, highlighted into source.html if given
            mode: Scroll mode (defaults to settings)
            base_period: Seconds per character at speed 1 (defaults to settings)
            step: Frame delta in seconds (defaults to settings)
            limit: Simulated seconds before giving up (defaults to settings)
            interact_delay: Seconds to wait at a gate before interacting
        """
        if isinstance(documents, ParsedText):
            documents = documents.documents
        self.documents = list(documents)
        self.output_dir = Path(output_dir)
        self.source = source
        self.mode = mode
        self.base_period = base_period
        self.step = appsettings.playback_step if step is None else step
        self.limit = appsettings.playback_limit if limit is None else limit
        self.interact_delay = (
            appsettings.interact_delay if interact_delay is None else interact_delay
        )
        self.clock = 0.0

    def run(self) -> Dict[str, Any]:
        """
        Run playback and write outputs

        Returns:
            dict with playback results and statistics
        """
        LOG("Starting playback...", level=2)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        entries = self.transcript_record()

        output_file = self.output_dir / "transcript.json"
        output_file.write_text(
            json.dumps([asdict(e) for e in entries], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        LOG(f"Wrote {output_file}", level=2)

        if self.source:
            preview_file = self.output_dir / "source.html"
            preview_file.write_text(self.source_highlight(), encoding="utf-8")
            LOG(f"Wrote {preview_file}", level=2)

        return {
            "status": True,
            "output_file": str(output_file),
            "segment_count": len(self.documents),
            "event_count": len(entries),
            "duration": round(self.clock, 6),
            "completed": self.clock < self.limit,
        }

    def transcript_record(self) -> List[TranscriptEntry]:
        """
        Reveal every Document and record the events

        A Document ends when the engine finishes, or when it is cleared after
        an await-clear gate. Playback stops early once the simulated clock
        reaches the limit (a repeating engine never ends by itself).

        Returns:
            Transcript entries in emission order
        """
        engine = RevealEngine(base_period=self.base_period, mode=self.mode, name="playback")
        frame = Frame([engine])
        entries: List[TranscriptEntry] = []
        self.clock = 0.0

        for segment, document in enumerate(self.documents):
            engine.bind(document)
            waited = 0.0
            LOG(f"Segment {segment}: {document.text!r}", level=2)

            while self.clock < self.limit:
                if engine.status is RevealStatus.AWAITING_CLEAR:
                    if waited >= self.interact_delay:
                        frame.interact()
                    waited += self.step

                events = frame.update(self.step)[engine]
                self.clock += self.step

                for event in events:
                    entry = TranscriptEntry(
                        time=round(self.clock, 6), segment=segment, event=event_name(event)
                    )
                    if isinstance(event, CharacterRevealed):
                        entry.index = event.index
                        entry.character = event.character
                    elif isinstance(event, WordRevealed):
                        entry.index = event.index
                    entries.append(entry)

                if any(isinstance(e, Cleared) for e in events):
                    break
                if engine.status in (RevealStatus.FINISHED, RevealStatus.IDLE):
                    break
            else:
                LOG(f"Playback limit of {self.limit}s reached in segment {segment}", level=1)
                break

        return entries

    def source_highlight(self) -> str:
        """
        Render the markup source as a standalone highlighted HTML page

        Returns:
            HTML document string
        """
        formatter = HtmlFormatter(
            style=appsettings.pygments_style,
            noclasses=True,
            full=True,
            title="revealtext source",
        )
        return highlight(self.source, RevealTextLexer(), formatter)
