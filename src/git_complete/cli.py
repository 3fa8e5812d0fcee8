"""CLI commands for completing lines from a file's own git history."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

import typer

from .buffer import TextBuffer
from .collaborators import CopyIndentReindenter, IndexPicker, NullReindenter
from .config import DEFAULT_CONFIG_NAME, CompletionConfig, ConfigError, dump_config, load_config
from .engine import NO_COMPLETIONS_MESSAGE, CompletionEngine, CompletionOutcome, Session
from .tools.vcs import GitError, GitRepository

APP_HELP = "Complete lines from the git repository they live in."

app = typer.Typer(help=APP_HELP)


class PromptPicker:
    """Lists candidates on the terminal and asks for a rank."""

    def pick(self, candidates: Sequence[str]) -> str | None:
        for index, candidate in enumerate(candidates, start=1):
            typer.echo(f"{index:>3}  {candidate}", err=True)
        answer = typer.prompt("Candidate (blank to cancel)", default="", show_default=False, err=True)
        answer = answer.strip()
        if not answer:
            return None
        try:
            rank = int(answer)
        except ValueError:
            return None
        if 1 <= rank <= len(candidates):
            return candidates[rank - 1]
        return None


def _load_config(config: Optional[str]) -> CompletionConfig:
    """Load the explicit config file, or the default one when it exists."""
    config_path = Path(config) if config else Path(DEFAULT_CONFIG_NAME)
    try:
        return load_config(config_path, required=config is not None)
    except ConfigError as error:
        typer.echo(str(error))
        raise typer.Exit(code=1) from error


def _position_buffer(buffer: TextBuffer, line: int, column: Optional[int]) -> None:
    """Move the cursor to 1-based ``line`` and 0-based ``column``."""
    line_count = buffer.text.count("\n") + 1
    if line < 1 or line > line_count:
        raise typer.BadParameter(f"line must be between 1 and {line_count}", param_hint="--line")
    if column is not None and column < 0:
        raise typer.BadParameter("column must not be negative", param_hint="--column")
    buffer.goto_line(line - 1, column)


@app.command()
def complete(
    file: Path = typer.Argument(..., help="File to complete in."),
    line: int = typer.Option(..., "--line", "-l", help="1-based line holding the cursor."),
    column: Optional[int] = typer.Option(
        None,
        "--column",
        help="0-based cursor column; defaults to the end of the line.",
    ),
    pick: int = typer.Option(
        1,
        "--pick",
        "-p",
        help="Rank of the candidate to insert at every step.",
    ),
    interactive: bool = typer.Option(
        False,
        "--interactive",
        "-i",
        help="Choose each candidate from a prompt instead of --pick.",
    ),
    mode: Optional[str] = typer.Option(
        None,
        "--mode",
        help="Language mode of the file (guessed from the suffix by default).",
    ),
    omni: Optional[bool] = typer.Option(
        None,
        "--omni/--no-omni",
        help="Shorten the query when the whole line finds nothing (default from config).",
    ),
    repeat: Optional[bool] = typer.Option(
        None,
        "--repeat/--no-repeat",
        help="Keep completing following lines (default from config).",
    ),
    indent: bool = typer.Option(
        True,
        "--indent/--no-indent",
        help="Copy the current indentation onto inserted lines.",
    ),
    write: bool = typer.Option(
        False,
        "--write",
        "-w",
        help="Write the result back to FILE instead of printing it.",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Path to the configuration file (default: {DEFAULT_CONFIG_NAME} if present).",
    ),
) -> None:
    """Complete the line at the cursor and print the updated file."""
    if not file.is_file():
        raise typer.BadParameter(f"File not found: {file}", param_hint="FILE")
    if pick < 1:
        raise typer.BadParameter("pick must be at least 1", param_hint="--pick")

    completion_config = _load_config(config)
    buffer = TextBuffer.from_file(file, mode=mode or "")
    _position_buffer(buffer, line, column)

    engine = CompletionEngine(
        config=completion_config,
        picker=PromptPicker() if interactive else IndexPicker(pick - 1),
        reindenter=CopyIndentReindenter() if indent else NullReindenter(),
    )
    result = engine.complete(
        buffer,
        Session(file_path=file),
        omni=omni,
        repeat=repeat,
    )

    if result.outcome is CompletionOutcome.NOT_IN_REPOSITORY:
        typer.echo(f"Not inside a git repository: {result.message}")
        raise typer.Exit(code=1)
    if result.outcome is CompletionOutcome.NO_CANDIDATES:
        typer.echo(result.message or NO_COMPLETIONS_MESSAGE)
        raise typer.Exit(code=1)
    if result.outcome is CompletionOutcome.EMPTY_QUERY:
        return
    if result.outcome is CompletionOutcome.CANCELLED and not result.inserted:
        return

    if write:
        file.write_text(buffer.text, encoding="utf-8")
        typer.echo(f"Inserted {len(result.inserted)} line(s) into {file}.")
    else:
        typer.echo(buffer.text, nl=False)


@app.command()
def candidates(
    query: str = typer.Argument(..., help="Literal text to search for."),
    next_line: bool = typer.Option(
        False,
        "--next-line",
        help="Rank the lines following each match instead of the matches.",
    ),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        "-t",
        help="Minimum share of all hits a candidate needs (default from config).",
    ),
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        help="Directory inside the repository to search (default: current directory).",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Path to the configuration file (default: {DEFAULT_CONFIG_NAME} if present).",
    ),
) -> None:
    """List ranked candidates for QUERY with their occurrence counts."""
    completion_config = _load_config(config)
    try:
        repo = GitRepository.discover(root)
        engine = CompletionEngine(config=completion_config)
        raw_lines = engine.search.search(query, context=next_line, root=repo.root)
    except GitError as error:
        typer.echo(f"Search failed: {error}")
        raise typer.Exit(code=1) from error

    tally = engine.ranker.tally(raw_lines, multiline=next_line)
    if threshold is None:
        threshold = completion_config.threshold
    ranked: List[tuple[str, int]] = tally.ranked(threshold)
    if not ranked:
        typer.echo(NO_COMPLETIONS_MESSAGE)
        raise typer.Exit(code=1)

    typer.echo(f"{len(ranked)} candidate(s) from {tally.total} hit(s):")
    for text, count in ranked:
        typer.echo(f"{count:>5}  {text}")


@app.command("config")
def show_config(
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Path to the configuration file (default: {DEFAULT_CONFIG_NAME} if present).",
    ),
) -> None:
    """Print the effective configuration as YAML."""
    completion_config = _load_config(config)
    typer.echo(dump_config(completion_config), nl=False)


if __name__ == "__main__":
    app()
