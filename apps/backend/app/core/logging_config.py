"""Logging setup for the API process."""

import logging

_CONSOLE_FORMAT = "[%(asctime)s.%(msecs)03d] %(levelname)s - %(name)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """
    Install a single console handler on the root logger.

    Safe to call more than once; an existing handler installed here is
    replaced rather than duplicated.

    Args:
        level: Level name such as "DEBUG" or "INFO". Unknown names fall back to INFO.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(root.handlers):
        if getattr(handler, "_chat_relay", False):
            root.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT, _DATE_FORMAT))
    console_handler._chat_relay = True  # type: ignore[attr-defined]
    root.addHandler(console_handler)

    # httpx logs every Stream request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
