#!/usr/bin/env python3
"""
Configuration loading and logging setup for the kernel viewer.
"""
import copy
import logging
import os
import sys
from pathlib import Path

import yaml

from KernelSettings import KernelSettings, PRESETS, DEFAULT_AREA_SIZE, MAX_AREA_SIZE

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"

DEFAULTS = {
    'input': {
        'path': 'input.jpg',
    },
    'kernel': {
        'area_size': DEFAULT_AREA_SIZE,
        'weights': None,
        'preset': None,
        'max_area_size': MAX_AREA_SIZE,
    },
    'parallel': {
        'n_jobs': -1,
        'block_rows': None,
        'prefer': 'threads',
    },
    'output': {
        'path': None,
    },
    'logging': {
        'level': 'INFO',
        'log_to_file': False,
        'log_file': 'kernel_viewer.log',
    },
}


def load_config(config_file=None):
    """
    Load the YAML configuration, filling gaps from DEFAULTS.

    A missing or unparsable file is logged and replaced by the defaults.
    """
    config_path = Path(config_file) if config_file else DEFAULT_CONFIG_PATH

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            loaded = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logging.error(f"Configuration file {config_path} not found, using defaults")
        return copy.deepcopy(DEFAULTS)
    except yaml.YAMLError as e:
        logging.error(f"Failed to parse YAML file {config_path}: {e}")
        return copy.deepcopy(DEFAULTS)

    if not isinstance(loaded, dict):
        logging.error(f"Configuration file {config_path} is not a mapping, using defaults")
        return copy.deepcopy(DEFAULTS)

    config = copy.deepcopy(DEFAULTS)
    for section, values in loaded.items():
        if section not in config:
            logging.warning(f"Unknown configuration section: {section}")
            continue
        if isinstance(values, dict):
            config[section].update(values)
        elif values is not None:
            logging.warning(f"Configuration section {section} is not a mapping, using defaults")
    for section in DEFAULTS:
        if section not in loaded:
            logging.warning(f"Missing configuration section: {section}")

    logging.info(f"Loaded configuration from {config_path}")
    return config


def validate_kernel_config(config):
    """Return the initial KernelSettings described by the `kernel` section."""
    kernel = config['kernel']
    max_area_size = kernel.get('max_area_size', MAX_AREA_SIZE)

    preset = kernel.get('preset')
    if preset is not None:
        if not isinstance(preset, str) or preset not in PRESETS:
            raise ValueError(f"Unknown kernel.preset {preset!r}, expected one of {sorted(PRESETS)}")
        settings = PRESETS[preset]
        if settings.area_size > max_area_size:
            raise ValueError(f"kernel.preset {preset!r} is larger than max_area_size {max_area_size}")
        return settings

    area_size = kernel['area_size']

    if not isinstance(area_size, int) or not 1 <= area_size <= max_area_size:
        raise ValueError(f"kernel.area_size must be an integer in [1, {max_area_size}], got {area_size!r}")

    if kernel.get('weights') is None:
        return KernelSettings.ones(area_size)
    return KernelSettings(area_size, kernel['weights'])


def setup_logging(config):
    """Configure the root logger from the `logging` section."""
    logging_config = config.get('logging', {})
    log_level = str(logging_config.get('level', 'INFO')).upper()

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    logger = logging.getLogger()
    logger.setLevel(log_level)
    logger.addHandler(console_handler)

    if logging_config.get('log_to_file', False):
        log_file = logging_config.get('log_file', 'kernel_viewer.log')
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logging.info(f"Logging to file: {log_file}")

    logging.info(f"Logging level set to {log_level}")
