#!/usr/bin/env python3

import os
from pathlib import Path
import argparse

APP_NAME = "breakwatch"
DEFAULT_CONFIG_DIR = Path.home() / ".config" / APP_NAME
DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / APP_NAME
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / f"{APP_NAME}.conf"
DEFAULT_LOG_FILE = DEFAULT_DATA_DIR / f"{APP_NAME}.log"
STATE_FILE = Path(os.environ.get(
    'BREAKWATCH_STATE_FILE', f"/tmp/{APP_NAME}.json"))

SECONDS_PER_MINUTE = 60

# --- Argument and Configuration Single Source of Truth ---
# - 'group': section in the .conf file.
# - 'default': the ultimate fallback value.
# - 'type', 'action', 'help': used to build the argparse parser.
# - 'short', 'long': the command-line flags.
# Durations are in minutes except 'tick', which is in seconds.
ARGUMENTS_CONFIG = {
    # Timer Settings
    'timer': {
        'group': 'timer',
        'default': '',
        'type': str,
        'short': '-t',
        'long': '--timer',
        'help': """Set a timer preset (see --show-presets) or custom values:
                 'INTERVAL STEP MIN_INTERVAL'. Example: --timer "45 5 10"."""
    },
    'interval': {
        'group': 'timer',
        'default': 50,
        'type': int,
        'short': '-i',
        'long': '--interval',
        'help': "Minutes between break reminders."
    },
    'step': {
        'group': 'timer',
        'default': 5,
        'type': int,
        'short': '-s',
        'long': '--step',
        'help': "Minutes added or removed by the +/- keys."
    },
    'min_interval': {
        'group': 'timer',
        'default': 5,
        'type': int,
        'short': '-m',
        'long': '--min-interval',
        'help': "Smallest allowed break interval in minutes."
    },
    'max_interval': {
        'group': 'timer',
        'default': 0,
        'type': int,
        'long': '--max-interval',
        'help': "Largest allowed break interval in minutes (0 for no limit)."
    },
    'max_breaks': {
        'group': 'timer',
        'default': 0,
        'type': int,
        'long': '--max-breaks',
        'help': "Exit after this many break reminders (0 to run forever)."
    },
    'tick': {
        'group': 'timer',
        'default': 1,
        'type': int,
        'long': '--tick',
        'help': "Seconds per countdown tick."
    },
    # Notification Settings
    'notify': {
        'group': 'notify',
        'default': True,
        'long': '--notify',
        'action': argparse.BooleanOptionalAction,
        'help': "Enable/disable desktop notifications."
    },
    'bell': {
        'group': 'notify',
        'default': True,
        'long': '--bell',
        'action': argparse.BooleanOptionalAction,
        'help': "Enable/disable the terminal bell on breaks."
    },
    'break_notify_msg': {
        'group': 'notify',
        'default': 'Time to take a break!',
        'type': str,
        'long': '--break-notify-msg',
        'help': "Message for break notifications."
    },
    'callback': {
        'group': 'notify',
        'default': '',
        'type': str,
        'long': '--callback',
        'help': "Script to call for break and interval change events."
    },
    'show_presets': {
        'long': '--show-presets',
        'action': 'store_true',
        'default': False,
        'help': 'Show presets and exit.'
    },
    # Presets - not a CLI arg, but part of config
    'presets': {
        'group': 'presets',
        'default': {
            "standard": "50 5 5",
            "eyes": "20 5 5",
            "ultradian": "90 10 10"
        }
    }
}

# Keys checked for positivity after all layers are applied.
POSITIVE_SETTINGS = ['interval', 'step', 'min_interval', 'tick']
