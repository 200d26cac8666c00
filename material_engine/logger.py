import logging
import sys
from typing import Union


def setup_logger(name: str = "material_engine", level: Union[int, str, None] = None) -> logging.Logger:
    """
    Set up and return a standardized logger.
    Args:
        name (str): Logger name
        level (int | str | None): Log level; None leaves the current level alone
    Returns:
        logging.Logger: Configured logger
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)

    # One stdout handler per logger, even across Streamlit reruns.
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s",
            "%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def set_package_level(level: Union[int, str]) -> None:
    logging.getLogger("material_engine").setLevel(level)
    for name, obj in logging.Logger.manager.loggerDict.items():
        if name.startswith("material_engine.") and isinstance(obj, logging.Logger):
            obj.setLevel(level)
