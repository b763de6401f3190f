"""Logger module."""

import logging
from typing import Any

ROOT_LOGGER = "che_launcher"


def get_handler(textio: Any):
    handler = logging.StreamHandler(textio)
    handler.setLevel(logging.DEBUG)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler.setFormatter(formatter)
    return handler


def get_logger(name: str, textio: Any):
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    if not logger.handlers:
        logger.addHandler(get_handler(textio=textio))
    return logger


def set_debug(enabled: bool):
    """Switch every launcher logger between INFO and DEBUG."""
    level = logging.DEBUG if enabled else logging.INFO
    for name in list(logging.root.manager.loggerDict):
        if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
            logging.getLogger(name).setLevel(level)
