#!/usr/bin/env python3

import argparse
import configparser
import sys
from pathlib import Path

from rich import print

from breakwatch.constants import (
    ARGUMENTS_CONFIG,
    DEFAULT_CONFIG_FILE,
    DEFAULT_LOG_FILE,
    POSITIVE_SETTINGS,
    SECONDS_PER_MINUTE,
)
from breakwatch.logger import setup_logging, logger
from breakwatch.timer import TimerSettings

# Order of the numbers in a custom timer string or preset.
TIMER_FIELDS = ['interval', 'step', 'min_interval']


def get_default_settings() -> dict:
    """Generates the default settings dictionary from the single source of truth."""
    defaults = {}
    for key, config in ARGUMENTS_CONFIG.items():
        default = config['default']
        defaults[key] = dict(default) if isinstance(default, dict) else default
    return defaults


def build_parser(suppress_defaults: bool = False) -> argparse.ArgumentParser:
    """With suppress_defaults, settings options appear in the namespace only when given."""
    parser = argparse.ArgumentParser(
        prog="breakwatch",
        argument_default=argparse.SUPPRESS if suppress_defaults else None,
        description=f"A terminal break reminder with a live-adjustable interval. Config: '{DEFAULT_CONFIG_FILE}', Log: '{DEFAULT_LOG_FILE}'.",
        epilog="Keys while running: + increase, - decrease, ? help, q quit.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # --- Dynamically build parser from ARGUMENTS_CONFIG ---
    for dest, config in ARGUMENTS_CONFIG.items():
        if 'long' not in config:
            continue  # config-only entries like 'presets'

        names = [config['long']]
        if 'short' in config:
            names.append(config['short'])

        kwargs = {'dest': dest, 'help': config['help']}
        if not suppress_defaults:
            kwargs['default'] = config['default']
        if 'type' in config:
            kwargs['type'] = config['type']
        if 'action' in config:
            kwargs['action'] = config['action']

        parser.add_argument(*names, **kwargs)

    parser.add_argument("--config-file", type=str,
                        default=str(DEFAULT_CONFIG_FILE), help="Path to settings file.")
    parser.add_argument("--log-file", type=str,
                        default=str(DEFAULT_LOG_FILE), help="Path to log file.")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable verbose output to console.")
    return parser


def parse_args(argv=None):
    """Returns the dests of the options the user actually gave and the parsed namespace.

    A second parse without defaults sees abbreviated and --no- forms the same
    way argparse itself does.
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    args = build_parser().parse_args(argv)
    given = vars(build_parser(suppress_defaults=True).parse_args(argv))
    provided = {dest for dest in given if dest in ARGUMENTS_CONFIG}
    return provided, args


def load_configuration(config_file: str) -> dict:
    """
    Loads settings from a .conf file, using ARGUMENTS_CONFIG for defaults.
    """
    settings = get_default_settings()
    config_file_path = Path(config_file)

    if not config_file_path.exists():
        logger.debug(f"Config file not found at {config_file_path}. Using default settings.")
        return settings

    logger.debug(f"Loading settings from {config_file_path}")
    parser = configparser.ConfigParser()
    try:
        parser.read(config_file_path)
    except configparser.Error as e:
        logger.error(f"Error reading config file {config_file_path}: {e}. Using defaults.")
        return settings

    for key, arg_config in ARGUMENTS_CONFIG.items():
        group = arg_config.get('group')
        if not group or group not in parser:
            continue

        if group == 'presets':
            for name, value in parser['presets'].items():
                settings['presets'][name.lower()] = value
        elif key in parser[group]:
            value_type = arg_config.get('type', str)
            try:
                if value_type == int:
                    value = parser[group].getint(key)
                elif arg_config.get('action') == argparse.BooleanOptionalAction:
                    value = parser[group].getboolean(key)
                else:
                    value = parser[group].get(key)
                settings[key] = value
            except ValueError as e:
                logger.debug(f"Could not parse '{key}' from config file: {e}. Using default.")

    return settings


def apply_timer(config: dict, explicit: set):
    """Expands config['timer'] (a preset name or 'INTERVAL STEP MIN') into the timer keys.

    Keys in ``explicit`` were given on the command line and keep their value.
    """
    timer_val = (config.get('timer') or '').strip().lower()
    if not timer_val:
        return

    timer_str = config['presets'].get(
        timer_val, timer_val if ' ' in timer_val else None)
    if timer_str is None:
        logger.error(f"Unknown timer preset '{timer_val}'.")
        sys.exit(1)

    logger.debug(f"Applying timer setting: '{timer_str}'")
    try:
        values = [int(v) for v in timer_str.split()]
    except ValueError:
        logger.error(f"Invalid numbers in timer string '{timer_str}'.")
        sys.exit(1)
    if len(values) != len(TIMER_FIELDS):
        logger.error(f"Invalid timer format '{timer_str}'. Expected {len(TIMER_FIELDS)} numbers.")
        sys.exit(1)

    for key, value in zip(TIMER_FIELDS, values):
        if key not in explicit:
            config[key] = value


def parse_config(provided, args) -> dict:
    # --- Settings layering: Defaults -> Config File -> Timer preset -> CLI Args ---
    setup_logging(args.log_file, args.verbose)
    config = load_configuration(args.config_file)
    logger.debug(f"User provided options: {provided}")
    logger.debug(f"Config after loading file: {config}")

    explicit = set()
    for dest, arg_config in ARGUMENTS_CONFIG.items():
        if 'long' in arg_config and dest in provided:
            value = getattr(args, dest)
            config[dest] = value
            explicit.add(dest)
            logger.debug(f"CLI override: '{dest}' set to '{value}'")

    apply_timer(config, explicit)
    logger.debug(f"Effective settings: {config}")

    # --- Final Validation ---
    for key in POSITIVE_SETTINGS:
        if not (isinstance(config.get(key), int) and config.get(key, 0) > 0):
            logger.error(f"{key.replace('_', ' ').capitalize()} must be a positive integer. Exiting.")
            sys.exit(1)
    for key in ['max_interval', 'max_breaks']:
        if not (isinstance(config.get(key), int) and config[key] >= 0):
            logger.error(f"{key.replace('_', ' ').capitalize()} cannot be negative. Exiting.")
            sys.exit(1)
    try:
        build_timer_settings(config)
    except ValueError as e:
        logger.error(f"Invalid timer settings: {e}. Exiting.")
        sys.exit(1)

    return config


def build_timer_settings(config: dict) -> TimerSettings:
    return TimerSettings(
        interval=config['interval'] * SECONDS_PER_MINUTE,
        min_interval=config['min_interval'] * SECONDS_PER_MINUTE,
        step=config['step'] * SECONDS_PER_MINUTE,
        max_interval=config['max_interval'] * SECONDS_PER_MINUTE,
        tick=config['tick'],
        max_breaks=config['max_breaks'],
    )


def show_presets(config_file: str):
    config = configparser.ConfigParser()
    config.read_dict({'presets': get_default_settings()['presets']})
    if Path(config_file).exists():
        config.read(config_file)

    if 'presets' in config:
        for name, value in config['presets'].items():
            print(f"{name}: {value}")
