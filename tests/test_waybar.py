"""Tests for breakwatch.waybar — status bar JSON from the state file."""
from __future__ import annotations

import json

from breakwatch import waybar
from breakwatch.waybar import IDLE_OUTPUT, build_output, current_remaining, get_state


def state(**overrides) -> dict:
    data = {"action": "countdown", "interval": 300, "remaining": 300,
            "breaks": 1, "time": 1000.0}
    data.update(overrides)
    return data


class TestGetState:
    def test_missing_file(self, state_file) -> None:
        assert get_state(state_file) == {}

    def test_invalid_json(self, state_file) -> None:
        state_file.write_text("{not json")
        assert get_state(state_file) == {}

    def test_reads_file(self, state_file) -> None:
        state_file.write_text(json.dumps(state()))
        assert get_state(state_file)['interval'] == 300


class TestCurrentRemaining:
    def test_counts_down_from_last_write(self) -> None:
        assert current_remaining(state(remaining=200), now=1060.0) == 140

    def test_exact_expiry_shows_full_interval(self) -> None:
        assert current_remaining(state(remaining=60), now=1060.0) == 300

    def test_wraps_into_next_cycle(self) -> None:
        assert current_remaining(state(remaining=10), now=1020.0) == 290


class TestBuildOutput:
    def test_idle(self) -> None:
        assert build_output({}) == IDLE_OUTPUT

    def test_countdown(self) -> None:
        output = build_output(state(remaining=600, interval=600), now=1060.0)
        assert output['text'].endswith("09:00")
        assert output['class'] == "countdown"
        assert "Breaks: 1" in output['tooltip']

    def test_break_icon(self) -> None:
        output = build_output(state(action="break"), now=1000.0)
        assert output['text'].startswith(waybar.BREAK_ICON)


class TestMain:
    def test_prints_json(self, state_file, monkeypatch, capsys) -> None:
        monkeypatch.setattr(waybar, "STATE_FILE", state_file)
        waybar.main()
        assert json.loads(capsys.readouterr().out) == IDLE_OUTPUT
