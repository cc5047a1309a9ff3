#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import toml
import yaml

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("vcsrepo")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. VCSREPO_CONFIG environment variable
    2. ~/.vcsrepo/ directory
    """
    if 'VCSREPO_CONFIG' in os.environ:
        return Path(os.environ['VCSREPO_CONFIG'])

    config_dir = Path.home() / '.vcsrepo'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def get_default_config():
    """Get default configuration."""
    return {
        "general": {
            "debug": False
        },
        "scan": {
            "metadata_file": "composer.json"
        },
        "drivers": {
            "timeout_seconds": 300,
            "order": ["github", "git", "hg", "svn"]
        },
        "github": {
            "token": "",
            "api_url": "https://api.github.com"
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        }
    }


def _read_config_file(config_path):
    """Read a config file in JSON, TOML or YAML format."""
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ('.yaml', '.yml'):
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            file_config = _read_config_file(config_path)
            if not isinstance(file_config, dict):
                raise TypeError(
                    f"Configuration root must be a mapping, got {type(file_config).__name__}"
                )
            config = merge_configs(config, file_config)
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    configure_logging(config)
    return config


def save_config(config):
    """Save configuration to file."""
    config_path = get_config_path()

    try:
        # Create directory if it doesn't exist
        config_path.parent.mkdir(parents=True, exist_ok=True)

        suffix = config_path.suffix.lower()
        if suffix == '.toml':
            with open(config_path, 'w') as f:
                toml.dump(config, f)
        elif suffix in ('.yaml', '.yml'):
            with open(config_path, 'w') as f:
                yaml.safe_dump(config, f, default_flow_style=False)
        else:
            # Default to JSON format
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)

        logger.info(f"Configuration saved to {config_path}")
    except Exception as e:
        logger.error(f"Error saving config to {config_path}: {e}")


def configure_logging(config):
    """Apply the logging section of the configuration to the vcsrepo logger."""
    logging_config = config.get("logging", {})
    level = str(logging_config.get("level", "INFO")).upper()
    if config.get("general", {}).get("debug"):
        level = "DEBUG"
    logger.setLevel(getattr(logging, level, logging.INFO))

    fmt = logging_config.get("format")
    if fmt:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(logging.Formatter(fmt))


def merge_configs(base_config, override_config):
    """
    Merge a config file's settings over the defaults.

    Sections merge key by key, so a file that only sets github.token
    keeps the default github.api_url. Any non-mapping value (including
    drivers.order) replaces the default outright.

    Returns:
        dict: New merged configuration; neither argument is modified
    """
    merged = dict(base_config)
    for key, value in override_config.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = value
    return merged


ENV_PREFIX = "VCSREPO_"


def apply_env_overrides(config):
    """
    Apply VCSREPO_<SECTION>_<KEY> environment variables.

    Only settings that already exist can be overridden, and each value is
    converted to the type of the setting it replaces:

        VCSREPO_GITHUB_TOKEN=0123abc          -> github.token (string)
        VCSREPO_DRIVERS_TIMEOUT_SECONDS=60    -> drivers.timeout_seconds (int)
        VCSREPO_DRIVERS_ORDER=git,svn         -> drivers.order (list)
        VCSREPO_GENERAL_DEBUG=true            -> general.debug (bool)
    """
    for env_key, value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue

        name = env_key[len(ENV_PREFIX):].lower()
        for section, settings in config.items():
            if not isinstance(settings, dict) or not name.startswith(section + '_'):
                continue
            key = name[len(section) + 1:]
            if key in settings:
                settings[key] = _convert_env_value(env_key, value, settings[key])
                break

    return config


def _convert_env_value(env_key, value, current):
    if isinstance(current, bool):
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    if isinstance(current, int):
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Ignoring {env_key}={value!r}: not an integer")
            return current
    if isinstance(current, list):
        return [item.strip() for item in value.split(',') if item.strip()]
    return value
