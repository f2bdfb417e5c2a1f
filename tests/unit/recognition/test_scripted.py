"""Tests for the scripted replay recognizer."""

import asyncio
import json

import pytest

from read_along.recognition.events import EndEvent, ErrorEvent, ResultEvent
from read_along.recognition.scripted import ScriptedRecognizer, ScriptedStep, load_script


def write_lines(path, *lines):
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


class TestLoadScript:
    def test_parses_events_and_delays(self, tmp_path):
        path = write_lines(
            tmp_path / "events.jsonl",
            "# recorded session",
            json.dumps({"type": "result", "alternatives": [{"transcript": "ka", "isFinal": True}], "delay": 0.2}),
            "",
            json.dumps({"type": "error", "error": "no-speech"}),
            json.dumps({"type": "end"}),
        )
        steps = load_script(path)
        assert [type(s.event) for s in steps] == [ResultEvent, ErrorEvent, EndEvent]
        assert steps[0].delay == 0.2
        assert steps[1].delay == 0.0

    def test_invalid_json_reports_line(self, tmp_path):
        path = write_lines(tmp_path / "events.jsonl", '{"type": "end"}', "{oops")
        with pytest.raises(ValueError, match=":2:"):
            load_script(path)

    @pytest.mark.parametrize("line", ['["end"]', '"end"', "3"])
    def test_non_object_line_rejected(self, tmp_path, line):
        path = write_lines(tmp_path / "events.jsonl", '{"type": "end"}', line)
        with pytest.raises(ValueError, match=":2: expected an event object"):
            load_script(path)


class TestScriptedRecognizer:
    """Test replay behaviour."""

    @pytest.mark.asyncio
    async def test_plays_until_end(self):
        events = []
        engine = ScriptedRecognizer(
            [ResultEvent(alternatives=[{"text": "ka"}]), EndEvent(), ResultEvent(alternatives=[{"text": "kha"}])]
        )
        engine.bind(events.append)
        engine.start("te-IN")
        await asyncio.sleep(0.01)

        assert [e.type for e in events] == ["result", "end"]
        assert engine.running is False
        assert engine.exhausted is False

        engine.start("te-IN")
        await asyncio.wait_for(engine.finished.wait(), timeout=1)
        assert [e.type for e in events] == ["result", "end", "result"]
        assert engine.exhausted is True

    @pytest.mark.asyncio
    async def test_respects_step_delay(self):
        events = []
        engine = ScriptedRecognizer([ScriptedStep(event=EndEvent(), delay=10.0)])
        engine.bind(events.append)
        engine.start("te-IN")
        await asyncio.sleep(0.01)
        assert events == []

        engine.stop()
        assert engine.stop_calls == 1
        assert engine.running is False

    @pytest.mark.asyncio
    async def test_start_while_running_rejected(self):
        engine = ScriptedRecognizer([ScriptedStep(event=EndEvent(), delay=10.0)])
        engine.start("te-IN")
        with pytest.raises(RuntimeError):
            engine.start("te-IN")
        engine.stop()

    @pytest.mark.asyncio
    async def test_fail_starts(self):
        engine = ScriptedRecognizer(fail_starts=1)
        with pytest.raises(RuntimeError):
            engine.start("te-IN")
        engine.start("te-IN")
        assert engine.start_calls == ["te-IN"]

    @pytest.mark.asyncio
    async def test_unsupported_language(self):
        events = []
        engine = ScriptedRecognizer([EndEvent()], unsupported_languages={"te-IN"})
        engine.bind(events.append)
        engine.start("te-IN")
        await asyncio.sleep(0)

        assert len(events) == 1
        assert events[0].code == "language-not-supported"
        assert engine.running is False
        assert engine.exhausted is False
