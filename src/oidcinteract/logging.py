"""Logging set-up for the interaction server"""
import copy
import logging
from logging.config import dictConfig
from typing import Optional

LOGGING_DEFAULT = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {"default": {"format": "%(asctime)s %(name)s:%(levelname)s %(message)s"}},
    "handlers": {"default": {"class": "logging.StreamHandler", "formatter": "default"}},
    "root": {"handlers": ["default"], "level": "INFO"},
}


def configure_logging(debug: Optional[bool] = False,
                      config: Optional[dict] = None) -> logging.Logger:
    """
    Apply the 'logging' section of the server configuration, or a single
    stream handler when there is none.

    :param debug: Force the root logger to DEBUG
    :param config: A logging.config dictionary
    :return: The root logger
    """
    _config = copy.deepcopy(LOGGING_DEFAULT if config is None else config)
    if debug:
        _config.setdefault("root", {})["level"] = "DEBUG"

    dictConfig(_config)
    return logging.getLogger()
