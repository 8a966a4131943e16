"""Logging configuration helpers."""

import logging


def configure_logging(level: str = "INFO") -> None:
    """Configure the paid_chat logger once; later calls only adjust the level.

    Handlers never see session tokens or API keys; callers log transaction
    and correlation ids through ``extra`` instead.
    """
    logger = logging.getLogger("paid_chat")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
