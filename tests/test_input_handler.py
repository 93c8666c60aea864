"""Tests for breakwatch.input_handler — key bindings and raw key reading."""
from __future__ import annotations

import os
from unittest.mock import MagicMock, patch

import pytest

from breakwatch.input_handler import KeyReader, command_for

pytestmark = pytest.mark.skipif(os.name == 'nt', reason="POSIX terminal handling")


class TestBindings:
    @pytest.mark.parametrize("key, command", [
        ("+", "increase"),
        ("=", "increase"),
        ("-", "decrease"),
        ("?", "help"),
        ("q", "quit"),
        ("\x03", "quit"),
    ])
    def test_known_keys(self, key: str, command: str) -> None:
        assert command_for(key) == command

    def test_unknown_key(self) -> None:
        assert command_for("x") is None


class TestKeyReader:
    def test_reads_one_key_at_a_time_from_pipe(self) -> None:
        read_fd, write_fd = os.pipe()
        os.write(write_fd, b"+q")
        with os.fdopen(read_fd) as stream, KeyReader(stream) as keys:
            assert keys.read_key(timeout=0.1) == "+"
            assert keys.read_key(timeout=0.1) == "q"
            assert keys.read_key(timeout=0.01) is None
            os.close(write_fd)
            with pytest.raises(EOFError):
                keys.read_key(timeout=0.1)

    @patch("breakwatch.input_handler.tty")
    @patch("breakwatch.input_handler.termios")
    def test_non_terminal_left_alone(self, mock_termios, mock_tty) -> None:
        stream = MagicMock()
        stream.isatty.return_value = False
        with KeyReader(stream):
            pass
        mock_termios.tcgetattr.assert_not_called()
        mock_tty.setcbreak.assert_not_called()

    @patch("breakwatch.input_handler.tty")
    @patch("breakwatch.input_handler.termios")
    def test_terminal_restored_after_error(self, mock_termios, mock_tty) -> None:
        stream = MagicMock()
        stream.isatty.return_value = True
        stream.fileno.return_value = 7
        mock_termios.tcgetattr.return_value = ["saved"]

        with pytest.raises(RuntimeError):
            with KeyReader(stream):
                mock_tty.setcbreak.assert_called_once_with(7)
                raise RuntimeError("boom")

        mock_termios.tcsetattr.assert_called_once_with(
            7, mock_termios.TCSADRAIN, ["saved"])
