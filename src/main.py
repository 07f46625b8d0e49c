import logging
import os
import sys
from typing import List, Optional

from errors import LedgerError
from output_formatter import format_accounts
from ledger_engine import LedgerEngine

LOG_LEVEL_ENV = "LEDGER_LOG_LEVEL"

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    configure_logging()

    if not argv:
        print("Usage: ledger <input.csv>")
        return 1

    filepath = argv[0]
    engine = LedgerEngine()
    try:
        accounts = engine.process_file(filepath)
    except (LedgerError, OSError) as e:
        logger.debug(f"Aborting {filepath}", exc_info=True)
        print(e)
        return 1

    print(format_accounts(accounts))
    return 0


if __name__ == "__main__":
    sys.exit(main())
