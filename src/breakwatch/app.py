#!/usr/bin/env python3

import sys
from threading import Event, Thread

from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from breakwatch.config import (
    build_timer_settings,
    parse_args,
    parse_config,
    show_presets,
)
from breakwatch.constants import STATE_FILE
from breakwatch.input_handler import HELP_TEXT, KeyReader, command_for
from breakwatch.logger import console, logger
from breakwatch.notifier import Notifier
from breakwatch.timer import BreakTimer, format_time

UNKNOWN_COMMAND = "Unknown command (press ? for help)"
POLL_INTERVAL = 0.25


class App:
    def __init__(self, settings: dict, stdin=None, state_file=None):
        self.settings = settings
        self.stdin = stdin if stdin is not None else sys.stdin
        self.notifier = Notifier(
            settings, state_file=state_file if state_file is not None else STATE_FILE)
        self.timer = BreakTimer(build_timer_settings(settings),
                                notify=self.notifier.break_due)
        self.stop_event = Event()
        self.message = ""

    def handle_key(self, key: str) -> bool:
        """Applies one keypress. Returns False when the user asked to quit."""
        command = command_for(key)
        if command == 'quit':
            logger.debug("Quit requested from keyboard")
            return False

        if command in ('increase', 'decrease'):
            if command == 'increase':
                change = self.timer.increase_interval()
            else:
                change = self.timer.decrease_interval()
            self.message = change.message
            logger.info(change.message, extra={"interval": change.new})
            self.notifier.interval_changed(change, self.timer.snapshot())
        elif command == 'help':
            self.message = HELP_TEXT
        else:
            self.message = UNKNOWN_COMMAND
        return True

    def render(self):
        state = self.timer.snapshot()
        table = Table.grid(padding=(0, 2))
        table.add_row(
            Text(f"Time until next break: {format_time(state.remaining)}",
                 style="bold green"),
            Text(f"Interval: {format_time(state.interval)}", style="green"),
            Text(f"Breaks: {state.breaks}", style="green"),
        )
        if self.message:
            table.add_row(Text(self.message, style="dim"))
        return Panel.fit(table, border_style="green")

    def run(self):
        state = self.timer.snapshot()
        self.notifier.started(state)
        logger.info("Break timer started", extra={"interval": state.interval})
        console.rule("[green]breakwatch started")
        console.print(HELP_TEXT, style="green")

        ticker = Thread(target=self.timer.run, args=(self.stop_event,),
                        daemon=True)
        ticker.start()
        try:
            with KeyReader(self.stdin) as keys, \
                    Live(self.render(), console=console,
                         refresh_per_second=4) as live:
                interactive = self.stdin.isatty()
                if not interactive:
                    logger.debug("stdin is not a terminal; key commands disabled")

                while not self.stop_event.is_set():
                    if interactive:
                        try:
                            key = keys.read_key(timeout=POLL_INTERVAL)
                        except EOFError:
                            logger.debug("stdin closed; key commands disabled")
                            interactive = False
                            continue
                        if key is not None and not self.handle_key(key):
                            break
                    else:
                        self.stop_event.wait(POLL_INTERVAL)
                    live.update(self.render())
        finally:
            self.stop_event.set()
            ticker.join(timeout=self.timer.settings.tick + 1)

        if self.timer.finished.is_set():
            logger.info(f"Completed {self.timer.snapshot().breaks} breaks")


def main(argv=None) -> int:
    provided, args = parse_args(argv)
    if args.show_presets:
        show_presets(args.config_file)
        return 0

    settings = parse_config(provided, args)
    app = App(settings)
    try:
        app.run()
    except KeyboardInterrupt:
        logger.info("Exiting...")
    finally:
        app.notifier.clear_state()
        logger.info("Session ended")
    return 0


if __name__ == "__main__":
    sys.exit(main())
