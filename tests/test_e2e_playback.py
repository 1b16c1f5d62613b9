"""
End-to-end playback tests

Tests the full pipeline: markup source → Parser → Compiler → reveal
playback → transcript and highlighted source on disk, including the command
line stages.
"""

import json
from argparse import Namespace

import pytest

from revealtext.__main__ import env_check, reveal_playback, results_report, source_parse
from revealtext.lib.compiler import parse, parse_text
from revealtext.lib.playback import Playback
from revealtext.models import Document, ProgramState, pipeline

PERIOD = 0.25


class TestPlayback:
    """Test offline playback of Documents"""

    def test_gated_document(self, tmp_path):
        """A built Document reveals, waits at its gate, then clears"""
        playback = Playback(
            [parse("Hi")],
            tmp_path,
            source="Hi",
            base_period=PERIOD,
            step=PERIOD,
            interact_delay=0.5,
        )
        result = playback.run()

        assert result["status"] is True
        assert result["segment_count"] == 1
        assert result["event_count"] == 7
        assert result["duration"] == 1.25
        assert result["completed"] is True

        entries = json.loads((tmp_path / "transcript.json").read_text())
        assert [e["event"] for e in entries] == [
            "rate_tick",
            "character_revealed",
            "word_revealed",
            "rate_tick",
            "character_revealed",
            "fully_revealed",
            "cleared",
        ]
        assert entries[1] == {
            "time": 0.25,
            "segment": 0,
            "event": "character_revealed",
            "index": 0,
            "character": "H",
        }

    def test_source_preview(self, tmp_path):
        """The markup source is written as highlighted HTML"""
        Playback([parse("Hi")], tmp_path, source="<2>`Hi|red`", step=PERIOD).run()
        html = (tmp_path / "source.html").read_text()
        assert "<html" in html
        assert "revealtext source" in html

    def test_no_source_no_preview(self, tmp_path):
        """Without source text only the transcript is written"""
        Playback([Document.from_text("a")], tmp_path, base_period=PERIOD, step=PERIOD).run()
        assert (tmp_path / "transcript.json").exists()
        assert not (tmp_path / "source.html").exists()

    def test_several_documents(self, tmp_path):
        """Each Document is revealed in turn and tagged with its segment"""
        documents = [Document.from_text("ab"), Document.from_text("c")]
        result = Playback(documents, tmp_path, base_period=PERIOD, step=PERIOD).run()
        entries = json.loads((tmp_path / "transcript.json").read_text())
        assert result["segment_count"] == 2
        assert [e["segment"] for e in entries if e["event"] == "fully_revealed"] == [0, 1]

    def test_parsed_text_input(self, tmp_path):
        """A ParsedText plays back every segment, closures included"""
        result = Playback(parse_text("a {b}"), tmp_path, base_period=PERIOD, step=PERIOD).run()
        assert result["segment_count"] == 3
        assert result["completed"] is True

    def test_repeating_hits_limit(self, tmp_path):
        """A repeating reveal never ends and stops at the limit"""
        result = Playback(
            [Document.from_text("ab")],
            tmp_path,
            mode="repeating",
            base_period=PERIOD,
            step=PERIOD,
            limit=2.0,
        ).run()
        assert result["completed"] is False
        assert result["duration"] == 2.0


class TestCommandLineStages:
    """Test the command line pipeline stages"""

    @pytest.fixture
    def state(self, tmp_path):
        inputdir = tmp_path / "in"
        inputdir.mkdir()
        (inputdir / "dialogue.rt").write_text("Hi {there} `bye|red`[wave]\n")
        return ProgramState(
            inputdir=inputdir,
            outputdir=tmp_path / "out",
            inputFile="dialogue.rt",
            outputSubdir="run",
            verbosity=0,
        )

    def test_state_from_namespace(self, tmp_path):
        """Unknown options are ignored when building ProgramState"""
        options = Namespace(inputFile="x.rt", mode="once", outputSubdir=".", verbosity=2, extra=1)
        state = ProgramState.state_createFromNamespace(options, tmp_path, tmp_path / "out")
        assert state.inputFile == "x.rt"
        assert state.mode == "once"
        assert state.inputdir == tmp_path
        assert not hasattr(state, "extra")

    def test_env_check(self, state):
        """Paths are resolved and the output directory created"""
        checked = env_check(state)
        assert checked.envOK is True
        assert checked.inputSourceFile.name == "dialogue.rt"
        assert checked.playbackOutputdir.is_dir()
        assert state.envOK is False

    def test_env_check_missing_file(self, state):
        """A missing input file exits"""
        state.inputFile = "missing.rt"
        with pytest.raises(SystemExit):
            env_check(state)

    def test_source_parse(self, state):
        """Closures are played back in place"""
        parsed = source_parse(env_check(state))
        assert [d.text for d in parsed.parsedDocuments] == ["Hi ", "there", "bye"]

    def test_source_parse_error_exits(self, state):
        """Malformed markup exits"""
        (state.inputdir / "dialogue.rt").write_text("`oops|pink`")
        with pytest.raises(SystemExit):
            source_parse(env_check(state))

    def test_full_pipeline(self, state):
        """All stages together write a transcript"""
        final = pipeline(state, env_check, source_parse, reveal_playback, results_report)
        assert final.playbackResult["segment_count"] == 3
        assert final.playbackResult["completed"] is True
        assert (state.outputdir / "run" / "transcript.json").exists()
        assert (state.outputdir / "run" / "source.html").exists()
