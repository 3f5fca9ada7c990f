from __future__ import annotations

import logging


def setup_logging(verbose: bool, log_file: str | None = None) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    # The interactive shell owns the terminal; send records to a file when one is set.
    if log_file:
        logging.basicConfig(
            level=level,
            filename=log_file,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            force=True,
        )
    else:
        logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
