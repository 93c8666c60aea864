#!/usr/bin/env python3

import json
import os
import subprocess
from threading import Lock
from time import time

from breakwatch.constants import STATE_FILE
from breakwatch.logger import console, logger
from breakwatch.timer import IntervalChange, TimerState


class Notifier:
    """Everything that happens outside the terminal when the timer changes.

    Delivery failures are logged and swallowed so a missing ``notify-send``
    or a broken callback script never stops the countdown.
    """

    def __init__(self, settings: dict, state_file=STATE_FILE):
        self.settings = settings
        self.state_file = state_file
        self._state_lock = Lock()
        self._last_written = 0.0

    def started(self, state: TimerState):
        data = self._state_data("countdown", state)
        self._write_state(data)
        self._run_callback(self.settings.get('callback'), data)

    def break_due(self, state: TimerState):
        msg = self.settings['break_notify_msg']
        logger.info(msg, extra={"interval": state.interval,
                                "breaks": state.breaks})
        if self.settings.get('bell', False):
            console.bell()
        self._notify(msg)

        data = self._state_data("break", state)
        self._write_state(data)
        self._run_callback(self.settings.get('callback'), data)

    def interval_changed(self, change: IntervalChange, state: TimerState):
        data = self._state_data("interval_change", state)
        data["previous_interval"] = change.old
        self._write_state(data)
        self._run_callback(self.settings.get('callback'), data)

    def clear_state(self):
        try:
            self.state_file.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to remove state file: {e}")

    def _state_data(self, action: str, state: TimerState) -> dict:
        return {
            "action": action,
            "interval": state.interval,
            "remaining": state.remaining,
            "breaks": state.breaks,
            "time": time(),
        }

    def _notify(self, msg):
        if self.settings.get('notify', False):
            try:
                subprocess.Popen(['notify-send', 'breakwatch', msg])
            except (FileNotFoundError, OSError) as e:
                logger.error(f"Failed to send notification: {e}")

    def _run_callback(self, callback_cmd, data):
        if callback_cmd:
            try:
                cmd = callback_cmd.split() + [json.dumps(data)]
                subprocess.Popen(
                    cmd,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL
                )
            except OSError as e:
                logger.error(f"Failed to run callback: {e}")

    def _write_state(self, data):
        # shared by the tick thread and the key loop
        tmp_path = self.state_file.with_name(self.state_file.name + ".tmp")
        with self._state_lock:
            if data["time"] < self._last_written:
                logger.debug(f"Skipping stale state write: {data['action']}")
                return
            try:
                with open(tmp_path, 'w') as f:
                    json.dump(data, f)
                os.replace(tmp_path, self.state_file)
                self._last_written = data["time"]
            except IOError as e:
                logger.error(f"Failed to write state file: {e}")
