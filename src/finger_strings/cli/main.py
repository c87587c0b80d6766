"""Entry point for the ``finger-strings`` command."""

import logging
import os
import signal
import sys
from pathlib import Path
from typing import Optional

import click

from .. import __version__
from ..config import ConfigModel, load_config
from ..display import Display
from ..engine import TodoEngine
from ..errors import StorageCorrupt
from ..storage import TodoStore
from .commands import CommandDispatcher
from .lineedit import LineEditor

logger = logging.getLogger(__name__)

PROMPT = "~> "

EPILOG = """\b
--schedule-update should be run once a day, e.g. with this crontab line:
  1 0 * * * finger-strings --schedule-update
"""


def build_engine(config: ConfigModel) -> TodoEngine:
    """Create an engine over the configured todo file."""
    return TodoEngine(
        TodoStore(config.get_todo_path()),
        defer_weekday=config.defer_weekday,
        long_defer_days=config.long_defer_days,
    )


def run_shell(engine: TodoEngine, config: ConfigModel, display: Optional[Display] = None) -> None:
    """Run the interactive prompt until quit or end of input."""
    display = display or Display(min_width=config.min_width, no_color=config.no_color)
    dispatcher = CommandDispatcher(engine, display)
    editor = LineEditor(config.get_history_path())

    if hasattr(signal, "SIGWINCH"):
        signal.signal(signal.SIGWINCH, lambda signum, frame: dispatcher.show_today())

    display.say(
        f"Welcome to FingerStrings v{__version__}.  "
        "Type 'help' for a list of commands; Ctrl-D or 'quit' to leave."
    )
    dispatcher.show_today()

    while True:
        try:
            line = editor.readline(PROMPT)
        except KeyboardInterrupt:
            display.say()
            continue

        if line is None or not dispatcher.handle(line):
            break


@click.command(epilog=EPILOG)
@click.option(
    "--todo-file",
    type=click.Path(dir_okay=False),
    help="Load the specified todo file instead of the default ~/.finger_strings",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Path to config file (default ~/.finger_strings.yaml)",
)
@click.option(
    "--schedule-update",
    is_flag=True,
    help="Move upcoming todos that are due into today's list, then exit",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.version_option(__version__, prog_name="FingerStrings")
def main(todo_file, config_path, schedule_update, verbose):
    """FingerStrings - a todo list driven by an interactive prompt."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    config = load_config(Path(config_path) if config_path else None)
    if todo_file:
        config.todo_file = os.path.expanduser(todo_file)

    engine = build_engine(config)

    try:
        if schedule_update:
            promoted = engine.update_for_schedules()
            logger.info(f"Promoted {len(promoted)} todos into today")
            return
        run_shell(engine, config)
    except StorageCorrupt as e:
        click.echo(str(e), err=True)
        sys.exit(1)
