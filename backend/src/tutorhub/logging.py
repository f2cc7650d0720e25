from __future__ import annotations

import logging

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    root = logging.getLogger()

    if not root.handlers:
        logging.basicConfig(level=level, format=_FORMAT)
    else:
        root.setLevel(level)

    logging.getLogger("tutorhub").setLevel(level)
    # Connection chatter from the cache client is only useful when debugging
    logging.getLogger("redis").setLevel(logging.DEBUG if debug else logging.WARNING)
