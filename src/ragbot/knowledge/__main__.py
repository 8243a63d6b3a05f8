import sys

import structlog

from ragbot.components import build_indexer
from ragbot.config import load_config, load_logging_settings
from ragbot.errors import RagbotError
from ragbot.util.logging import configure_logging

_logger = structlog.get_logger()

_USAGE = "Usage: python -m ragbot.knowledge index [--path PATH]"


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv

    if not args or args[0] != "index":
        print(_USAGE)
        return 1

    path: str | None = None
    if "--path" in args:
        idx = args.index("--path")
        if idx + 1 >= len(args):
            print("--path requires a value")
            return 1
        path = args[idx + 1]

    json_output, log_level = load_logging_settings()
    configure_logging(json_output=json_output, log_level=log_level)

    try:
        config = load_config()
        count = build_indexer(config).index(path)
    except RagbotError as e:
        _logger.error("indexing_failed", error=str(e))
        return 1

    _logger.info("indexing_complete", rows=count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
