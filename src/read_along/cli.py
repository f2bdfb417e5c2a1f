#!/usr/bin/env python3
"""read-along command line interface."""

import asyncio
import json
import sys
from pathlib import Path

import rich_click as click
from rich.console import Console
from rich.table import Table
from rich.text import Text

click.rich_click.USE_RICH_MARKUP = True

from .alignment.types import ReferenceSequence, SessionSummary, WordState  # noqa: E402
from .core.config import ConfigLoader  # noqa: E402
from .core.logging import setup_logging  # noqa: E402
from .errors import EmptyPassageError, ReadAlongError, RecognitionError  # noqa: E402
from .practice import PracticeSession  # noqa: E402
from .recognition.scripted import ScriptedRecognizer, load_script  # noqa: E402

console = Console()
err_console = Console(stderr=True)

STATE_STYLES = {
    WordState.CORRECT: "bold green",
    WordState.INCORRECT: "bold red",
    WordState.PENDING: "dim",
}


def _load_config(config_path: str | None, debug: bool) -> ConfigLoader:
    config = ConfigLoader(config_path)
    setup_logging(config, debug=debug)
    return config


def _read_passage(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _render_words(words: list[str], states: tuple[WordState, ...]) -> Text:
    text = Text()
    for word, state in zip(words, states):
        text.append(word, style=STATE_STYLES[state])
        text.append(" ")
    return text


def _print_summary(summary: SessionSummary, words: list[str], as_json: bool) -> None:
    if as_json:
        data = summary.to_dict()
        data["words"] = words
        click.echo(json.dumps(data, ensure_ascii=False))
        return

    console.print(_render_words(words, tuple(summary.word_states)))
    table = Table(title="Reading report" if summary.completed else "Reading report (stopped early)")
    table.add_column("Words", justify="right")
    table.add_column("Correct", justify="right", style="green")
    table.add_column("Incorrect", justify="right", style="red")
    table.add_column("Accuracy", justify="right", style="bold")
    table.add_row(
        str(summary.total_words),
        str(summary.correct_words),
        str(summary.incorrect_words),
        f"{summary.accuracy_percent}%",
    )
    console.print(table)


@click.group()
@click.version_option(package_name="read-along", prog_name="read-along")
def main():
    """📖 [bold cyan]read-along[/bold cyan] - follow a passage read aloud, word by word

    \b
    [bold yellow]🎯 Quick Start:[/bold yellow]
    \b
      [green]read-along words story.txt[/green]                   [italic]# Show the reference words[/italic]
      [green]read-along replay story.txt events.jsonl[/green]     [italic]# Replay recorded recognition events[/italic]
      [green]read-along listen story.txt --url ws://...[/green]   [italic]# Follow a live remote recognizer[/italic]
    """


@main.command()
@click.argument("passage_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "config_path", help=" ⚙️  Configuration file path")
@click.option("--json", "as_json", is_flag=True, help=" 📄 Output JSON")
def words(passage_file, config_path, as_json):
    """List the reference words of a passage."""
    config = _load_config(config_path, debug=False)
    try:
        reference = ReferenceSequence.from_passage(
            _read_passage(passage_file), require_script_letters=config.require_script_letters
        )
    except EmptyPassageError as e:
        err_console.print(f"[red]❌ {e}[/red]")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(reference.texts, ensure_ascii=False))
        return
    table = Table(title=f"{len(reference)} words")
    table.add_column("#", justify="right")
    table.add_column("Word")
    table.add_column("Normalized", style="dim")
    for index, word in enumerate(reference):
        table.add_row(str(index), word.text, word.normalized)
    console.print(table)


@main.command()
@click.argument("passage_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "config_path", help=" ⚙️  Configuration file path")
@click.option("--language", help=" 🌍 Recognition language code (e.g. 'te-IN')")
@click.option("--json", "as_json", is_flag=True, help=" 📄 Output JSON")
@click.option("--debug", is_flag=True, help=" 🐛 Enable detailed debug logging")
def replay(passage_file, events_file, config_path, language, as_json, debug):
    """Replay recorded recognition events (JSON Lines) against a passage."""
    config = _load_config(config_path, debug)
    try:
        steps = load_script(events_file)
    except (ValueError, ReadAlongError) as e:
        err_console.print(f"[red]❌ Could not load events: {e}[/red]")
        sys.exit(1)

    engine = ScriptedRecognizer(steps)
    summary = asyncio.run(_run_session(_read_passage(passage_file), engine, config, language, engine.finished))
    if summary is None:
        sys.exit(1)
    _print_summary(summary, summary_words(passage_file, config), as_json)


@main.command()
@click.argument("passage_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--url", required=True, help=" 🌐 WebSocket URL of the remote recognizer")
@click.option("--config", "config_path", help=" ⚙️  Configuration file path")
@click.option("--language", help=" 🌍 Recognition language code (e.g. 'te-IN')")
@click.option("--json", "as_json", is_flag=True, help=" 📄 Output JSON")
@click.option("--debug", is_flag=True, help=" 🐛 Enable detailed debug logging")
def listen(passage_file, url, config_path, language, as_json, debug):
    """Follow a live reading through a WebSocket recognizer bridge."""
    from .recognition.websocket import WebSocketRecognizer

    config = _load_config(config_path, debug)
    engine = WebSocketRecognizer(url)

    async def run() -> SessionSummary | None:
        await engine.connect()
        try:
            return await _run_session(_read_passage(passage_file), engine, config, language, None)
        finally:
            await engine.close()

    try:
        summary = asyncio.run(run())
    except KeyboardInterrupt:
        err_console.print("[yellow]Stopped[/yellow]")
        return
    except OSError as e:
        err_console.print(f"[red]❌ Could not connect to {url}: {e}[/red]")
        sys.exit(1)
    if summary is None:
        sys.exit(1)
    _print_summary(summary, summary_words(passage_file, config), as_json)


def summary_words(passage_file: str, config: ConfigLoader) -> list[str]:
    return ReferenceSequence.from_passage(
        _read_passage(passage_file), require_script_letters=config.require_script_letters
    ).texts


async def _run_session(passage, engine, config, language, source_finished) -> SessionSummary | None:
    """Run one practice session until it completes, fails or its source ends."""
    done = asyncio.Event()

    def on_fatal(error: RecognitionError) -> None:
        err_console.print(f"[red]❌ {error}[/red]")

    def on_notice(error: RecognitionError) -> None:
        err_console.print(f"[yellow]⚠️  {error}[/yellow]")

    session = PracticeSession(
        passage,
        engine,
        language=language,
        config=config,
        on_summary=lambda summary: done.set(),
        on_fatal=on_fatal,
        on_notice=on_notice,
    )
    try:
        session.start()
    except ReadAlongError as e:
        err_console.print(f"[red]❌ {e}[/red]")
        return None

    waiters = [asyncio.create_task(done.wait())]
    if source_finished is not None:
        waiters.append(asyncio.create_task(source_finished.wait()))
    try:
        await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for waiter in waiters:
            waiter.cancel()
        session.stop()
    return session.summary


if __name__ == "__main__":
    main()
