from __future__ import annotations

import logging

CLIENT_LOGGER = "protopedia_client"


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    # the client logs its own HTTP traffic; httpx/httpcore wire chatter stays at INFO at most
    logging.getLogger(CLIENT_LOGGER).setLevel(level)
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.INFO if verbose else logging.WARNING)
