#!/usr/bin/env python3

import json
import sys
import time

from breakwatch.constants import STATE_FILE
from breakwatch.timer import format_time

IDLE_OUTPUT = {"text": "breakwatch", "tooltip": "No break timer running"}
BREAK_ICON = "󰽙"
COUNTDOWN_ICON = "󰔛"


def get_state(state_file=None):
    """Reads the current state from the state file."""
    state_file = STATE_FILE if state_file is None else state_file
    if state_file.exists():
        try:
            return json.loads(state_file.read_text())
        except (json.JSONDecodeError, FileNotFoundError):
            return {}
    return {}


def current_remaining(state, now=None):
    """Projects the remaining seconds from the last write to now.

    The file is only rewritten on events, so a countdown that has since
    wrapped around is folded back into the current cycle.
    """
    now = time.time() if now is None else now
    interval = state["interval"]
    remaining = state["remaining"] - int(now - state["time"])
    if remaining <= 0:
        remaining = remaining % interval or interval
    return remaining


def build_output(state, now=None):
    if not state or "time" not in state or not state.get("interval"):
        return IDLE_OUTPUT

    remaining = current_remaining(state, now)
    icon = BREAK_ICON if state.get("action") == "break" else COUNTDOWN_ICON
    tooltip = (f"Next break in {format_time(remaining)}\n"
               f"Interval: {format_time(state['interval'])} - "
               f"Breaks: {state.get('breaks', 0)}")
    return {
        "text": f"{icon} {format_time(remaining)}",
        "tooltip": tooltip,
        "class": state.get("action", "countdown"),
    }


def main():
    """Prints one Waybar JSON line for the running timer."""
    print(json.dumps(build_output(get_state())))
    sys.stdout.flush()


if __name__ == "__main__":
    main()
