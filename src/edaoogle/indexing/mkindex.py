"""`edaoogle-mkindex`: rebuild the search index from a web root.

Every ``.html`` file under ``<WWW_PATH>/wiki`` becomes a document reachable
as ``/wiki/<filename>``. The previous index is replaced in one transaction.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from edaoogle.config import load_settings
from edaoogle.exceptions import ConfigError, CorpusError, StorageError
from edaoogle.logging_setup import configure_logging
from edaoogle.parsers.html_parser import HTMLParser
from edaoogle.storage.database import get_engine, init_db, make_session_factory

from .builder import rebuild_index
from .corpus import iter_corpus

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="edaoogle-mkindex", description="Build the EDAoogle search index"
    )
    parser.add_argument(
        "-H",
        "--www-path",
        help="web root containing the wiki/ directory (EDAOOGLE_CORPUS__WWW_PATH)",
    )
    parser.add_argument(
        "--database-url", help="SQLAlchemy URL of the index (EDAOOGLE_DATABASE__URL)"
    )
    parser.add_argument("--log-level", help="logging level (EDAOOGLE_APP__LOG_LEVEL)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        settings = load_settings()
        if args.www_path:
            settings.corpus.www_path = args.www_path
        if args.database_url:
            settings.database.url = args.database_url
        if args.log_level:
            settings.app.log_level = args.log_level
        configure_logging(settings.app.log_level)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    cfg = settings.corpus
    if not cfg.www_path:
        print("error: WWW_PATH must be specified.", file=sys.stderr)
        return 1

    try:
        engine = get_engine(settings.database.url, echo=settings.database.echo)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        init_db(engine)
        corpus = iter_corpus(
            cfg.www_path,
            subdir=cfg.subdir,
            url_prefix=cfg.url_prefix,
            extensions=cfg.extensions,
        )
        report = rebuild_index(
            make_session_factory(engine), corpus, parser=HTMLParser(encoding=cfg.encoding)
        )
    except (CorpusError, StorageError) as exc:
        logger.error("Index build failed: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        engine.dispose()

    print(
        f"Indexed {report.indexed_count} documents "
        f"({report.failed_count} failed, {len(report.skipped)} skipped) "
        f"in {report.elapsed_seconds:.3f} seconds"
    )
    for url, reason in sorted(report.failed.items()):
        print(f"  failed: {url}: {reason}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
