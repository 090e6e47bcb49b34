"""Logging setup for the `acedia` logger tree."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_HANDLER_NAME = "acedia-stream"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach one stream handler to the `acedia` logger and set its level.

    Safe to call on every session start: the handler is added only once.
    Fatal conditions ("operation abandoned", not "process terminated") are
    logged at CRITICAL.
    """
    root = logging.getLogger("acedia")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    return root
