"""End-to-end practice sessions over a scripted recognizer."""

import asyncio

import pytest

from read_along.alignment.types import WordState
from read_along.errors import EmptyPassageError, SessionStateError
from read_along.practice import PracticeSession
from read_along.recognition.controller import SessionState
from read_along.recognition.events import EndEvent, ErrorEvent, RecognitionAlternative, ResultEvent
from read_along.recognition.scripted import ScriptedRecognizer, ScriptedStep

pytestmark = pytest.mark.integration


def result(text: str, *alternatives: str, is_final: bool = True) -> ResultEvent:
    return ResultEvent(
        alternatives=[RecognitionAlternative(text=t) for t in (text, *alternatives)],
        is_final=is_final,
    )


class Harness:
    """PracticeSession plus recorded callbacks."""

    def __init__(self, passage, steps, config, **engine_kwargs):
        self.engine = ScriptedRecognizer(steps, **engine_kwargs)
        self.updates = []
        self.summaries = []
        self.fatal = []
        self.done = asyncio.Event()
        self.session = PracticeSession(
            passage,
            self.engine,
            config=config,
            on_update=lambda states, pointer: self.updates.append((states, pointer)),
            on_summary=self._on_summary,
            on_fatal=self.fatal.append,
        )

    def _on_summary(self, summary):
        self.summaries.append(summary)
        self.done.set()

    async def run(self, timeout: float = 1.0):
        self.session.start()
        await asyncio.wait_for(self.done.wait(), timeout=timeout)
        return self.summaries[-1]


class TestCompletedSessions:
    """Sessions that reach the end of the passage."""

    @pytest.mark.asyncio
    async def test_skip_to_last_word_completes(self, config):
        harness = Harness("ka kha ga", [result("ga")], config)
        summary = await harness.run()

        assert summary.completed is True
        assert summary.accuracy_percent == 100
        assert summary.word_states == [WordState.CORRECT] * 3
        assert harness.session.state == SessionState.STOPPED
        assert harness.engine.running is False

    @pytest.mark.asyncio
    async def test_mixed_reading(self, config):
        harness = Harness("ka kha ga", [result("ka"), result("xyz123"), result("ga")], config)
        summary = await harness.run()

        assert summary.word_states == [WordState.CORRECT, WordState.INCORRECT, WordState.CORRECT]
        assert summary.accuracy_percent == 67
        assert [pointer for _, pointer in harness.updates] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_recovers_across_engine_restarts(self, config):
        steps = [result("ka"), ErrorEvent(code="no-speech"), result("kha"), EndEvent(), result("ga")]
        harness = Harness("ka kha ga", steps, config)
        summary = await harness.run()

        assert summary.accuracy_percent == 100
        assert len(harness.engine.start_calls) == 3
        assert harness.fatal == []

    @pytest.mark.asyncio
    async def test_telugu_passage(self, config):
        steps = [result("నమస్తే"), result("మిత్రమ")]
        harness = Harness("నమస్తే, మిత్రమా!", steps, config)
        summary = await harness.run()

        assert summary.correct_words == 2
        assert summary.accuracy_percent == 100

    @pytest.mark.asyncio
    async def test_alternatives_rescue_misheard_word(self, config):
        harness = Harness("ka kha", [result("ka"), result("xyz", "kha")], config)
        summary = await harness.run()
        assert summary.word_states == [WordState.CORRECT, WordState.CORRECT]

    @pytest.mark.asyncio
    async def test_summary_emitted_once(self, config):
        harness = Harness("ka", [result("ka")], config)
        summary = await harness.run()

        assert harness.session.stop() is summary
        assert len(harness.summaries) == 1


class TestInterruptedSessions:
    """Sessions that end before the passage does."""

    @pytest.mark.asyncio
    async def test_no_speech_leaves_words_untouched(self, config):
        harness = Harness("ka kha ga", [result("ka"), ErrorEvent(code="no-speech")], config)
        harness.session.start()
        await asyncio.wait_for(harness.engine.finished.wait(), timeout=1)
        # Let the scheduled restart run
        await asyncio.sleep(0.01)

        assert harness.session.word_states == (WordState.CORRECT, WordState.PENDING, WordState.PENDING)
        assert harness.session.state == SessionState.LISTENING

        summary = harness.session.stop()
        assert summary.completed is False
        assert summary.accuracy_percent == 33
        assert harness.session.is_active is False

    @pytest.mark.asyncio
    async def test_fatal_error_emits_summary(self, config):
        harness = Harness("ka kha ga", [result("ka"), ErrorEvent(code="not-allowed")], config)
        summary = await harness.run()

        assert len(harness.fatal) == 1
        assert summary.completed is False
        assert summary.correct_words == 1
        assert summary.incorrect_words == 0
        assert harness.session.state == SessionState.STOPPED

    @pytest.mark.asyncio
    async def test_stop_while_waiting(self, config):
        harness = Harness("ka kha", [ScriptedStep(event=result("ka"), delay=10.0)], config)
        harness.session.start()
        await asyncio.sleep(0)

        summary = harness.session.stop()
        assert summary.word_states == [WordState.PENDING, WordState.PENDING]
        assert summary.accuracy_percent == 0
        assert harness.engine.running is False


class TestSessionLifecycle:
    def test_empty_passage_never_starts_engine(self, config):
        engine = ScriptedRecognizer()
        session = PracticeSession("  ?! ", engine, config=config)
        with pytest.raises(EmptyPassageError):
            session.start()
        assert engine.start_calls == []
        assert session.stop() is None

    @pytest.mark.asyncio
    async def test_start_twice_rejected(self, config):
        harness = Harness("ka kha", [], config)
        harness.session.start()
        with pytest.raises(SessionStateError):
            harness.session.start()

    @pytest.mark.asyncio
    async def test_restart_resets_progress(self, config):
        harness = Harness("ka kha ga", [result("ga")], config)
        await harness.run()

        harness.session.restart()
        assert harness.session.word_states == (WordState.PENDING,) * 3
        assert harness.session.pointer == 0
        assert harness.session.summary is None
        assert harness.session.state == SessionState.LISTENING
        assert harness.engine.start_calls == ["te-IN", "te-IN"]
