import logging
import os
import sys

from kafi import KafiError, Store

DEFAULT_DB_PATH = "kafi.db"

USAGE = """USAGE:
   to set: kafi [KEY] [VALUE]
   to get: kafi [KEY]"""

logger = logging.getLogger(__name__)


def print_usage() -> None:
    print(USAGE)


def run(args: list[str], db_path: str) -> int:
    if len(args) not in (1, 2):
        print_usage()
        return 2

    with Store.open(db_path) as store:
        if len(args) == 1:
            value = store.get(args[0])
            if value is not None:
                print(value)
        else:
            store.insert(args[0], args[1])
            logger.debug(f"Stored {args[0]!r} in {db_path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    args = sys.argv[1:] if argv is None else argv
    db_path = os.environ.get("KAFI_DB", DEFAULT_DB_PATH)

    try:
        return run(args, db_path)
    except KafiError as e:
        print(f"kafi: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
