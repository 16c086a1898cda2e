"""
Process setup for the command line client: logging and the YAML config file.

The config file has a few top level logging entries and a ``catalog``
section that CatalogService.from_config reads.
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

import yaml

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGLEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR
}

# Loggers of the HTTP stack that report every pooled connection at DEBUG
NOISY_LOGGERS = ('urllib3.connectionpool',)

CONFIG_DEFAULTS = {
    'loglevel': 'warning',
    'logfile_enabled': False,
    'logfile_path': 'logs/digicatalog.log',
    'max_logfile_size': 200,
    'log_everything': False
}


def resolve_loglevel(name: Optional[str], default: int = logging.WARNING) -> int:
    """Map a config loglevel name like 'debug' to a logging level."""
    if name is None:
        return default
    return LOGLEVELS.get(str(name).strip().lower(), default)


def setup_logging(level=logging.INFO, logfile=None, max_logfile_size_kb=200):
    """Configure root logger with consistent formatting.

    Args:
        level (int): Log level to set for the root logger.
        logfile (str): If specified, log to this file as well as the console.
        max_logfile_size_kb (int): Size at which the logfile is rotated.

    Returns:
        logging.Logger: Root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Replace handlers of an earlier call, e.g. the bootstrap logger in main()
    root_logger.handlers = []

    formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    # Console goes to stderr, stdout carries the command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if logfile:
        logdir = os.path.dirname(logfile)
        if logdir:
            os.makedirs(logdir, exist_ok=True)
        file_handler = RotatingFileHandler(logfile, maxBytes=max_logfile_size_kb * 1024, backupCount=2)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger


def quiet_third_party_loggers(level=logging.WARNING):
    """Raise the level of chatty HTTP stack loggers."""
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level)


def configure_logging_from_config(config: dict) -> logging.Logger:
    """Apply the logging entries of a loaded config."""
    logfile = config['logfile_path'] if config['logfile_enabled'] else None
    root_logger = setup_logging(
        level=resolve_loglevel(config['loglevel']),
        logfile=logfile,
        max_logfile_size_kb=config['max_logfile_size']
    )
    if not config['log_everything']:
        quiet_third_party_loggers()
    return root_logger


def default_config() -> dict:
    """Configuration used when no config file can be read."""
    config = dict(CONFIG_DEFAULTS)
    config['catalog'] = {}
    return config


def load_config(configfile: str) -> dict:
    """ Load the configuration file and check for validity.

    Missing top level entries are filled from CONFIG_DEFAULTS.

    Args:
        configfile (str): Path to the config file

    Returns:
        dict: The loaded configuration with a ``catalog`` mapping

    Raises:
        RuntimeError: If the config file is not found, is not valid YAML
            or is not a mapping

    """
    if not os.path.isfile(configfile):
        raise RuntimeError(f'Configfile {configfile} not found')

    with open(configfile, 'r', encoding='UTF-8') as f:
        try:
            loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RuntimeError(f'Configfile {configfile} is not valid YAML: {e}') from e

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise RuntimeError(f'Configfile {configfile} does not contain a mapping')

    config = default_config()
    config.update({key: value for key, value in loaded.items() if value is not None})

    if not isinstance(config['catalog'], dict):
        raise RuntimeError('Config entry catalog must be a mapping')

    try:
        config['max_logfile_size'] = int(config['max_logfile_size'])
    except (TypeError, ValueError) as e:
        raise RuntimeError(f'Config entry max_logfile_size must be a number: {e}') from e

    return config
