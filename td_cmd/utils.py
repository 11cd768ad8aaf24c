#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Utility functions for td-cmd.
"""
import configparser
import logging
import os

from td_cmd.errors import ConfigError


CONFIG_SECTION = "account"


def get_default_config_file():
    """Get the default configuration file path."""
    return os.path.join(os.path.expanduser("~"), ".td", "td.conf")


def load_config(config_path):
    """Load configuration from a file.

    Args:
        config_path (str): Path to the configuration file

    Returns:
        dict: Dictionary containing configuration parameters

    Raises:
        ConfigError: If a value in the file is invalid
    """
    config_params = {}

    if not os.path.exists(config_path):
        print(f"Config file not found: {config_path}")
        return config_params

    config = configparser.ConfigParser()
    try:
        config.read(config_path)
    except configparser.Error as e:
        raise ConfigError(f"Error reading config file {config_path}: {e}") from e

    if CONFIG_SECTION not in config:
        return config_params

    section = config[CONFIG_SECTION]
    for key in ('apikey', 'endpoint', 'format'):
        if key in section:
            config_params[key] = section[key]

    if 'poll_interval' in section:
        try:
            poll_interval = section.getfloat('poll_interval')
        except ValueError as e:
            raise ConfigError(f"poll_interval must be a number: {section['poll_interval']}") from e
        if poll_interval <= 0:
            raise ConfigError("poll_interval must be greater than 0")
        config_params['poll_interval'] = poll_interval

    return config_params


def configure_logging(verbose=False):
    """Send log records to stderr, at DEBUG level when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
