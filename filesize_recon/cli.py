"""
Command line driver for the file size count task.

Rebuild the histogram from a directory tree:

    (.venv) filesize-recon reprocess --root /data/volume1

Apply a JSON-lines batch of change events on top of the stored counts:

    (.venv) filesize-recon process --events events.jsonl

Tables are created if they do not exist yet. Exit status is 0 when the run
succeeded and 1 otherwise.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from filesize_recon.core.config import settings
from filesize_recon.db.init_db import init_db
from filesize_recon.db.session import build_engine, build_session_factory
from filesize_recon.services.file_count_store import FileCountBySizeStore
from filesize_recon.tasks.catalog import DirectoryCatalogTable
from filesize_recon.tasks.events import load_event_batch
from filesize_recon.tasks.file_size_count import FileSizeCountTask

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filesize-recon",
        description="Maintain the file size histogram (file_count_by_size).",
    )
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help="SQLAlchemy URL of the aggregate database",
    )
    parser.add_argument(
        "--max-file-size",
        type=int,
        default=settings.max_file_size_upper_bound,
        help="Sizes at or above this many bytes share the overflow bucket",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    reprocess = sub.add_parser("reprocess", help="Rebuild counts from a full directory scan")
    reprocess.add_argument("--root", required=True, help="Directory to scan")

    process = sub.add_parser("process", help="Apply a JSON-lines batch of change events")
    process.add_argument("--events", required=True, help="Path to the events file")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level)

    batch = None
    if args.command == "process":
        try:
            batch = load_event_batch(args.events)
        except (OSError, ValueError) as e:
            logger.error("Unable to load events from %s: %s", args.events, e)
            return 1
        if batch.is_empty():
            logger.info("No events in %s; stored counts will be rewritten unchanged.", args.events)
        else:
            logger.info(
                "Loaded %d events from %s up to sequence number %d",
                len(batch),
                args.events,
                batch.last_sequence_number(),
            )

    engine = build_engine(args.database_url)
    init_db(engine)
    store = FileCountBySizeStore(build_session_factory(engine))
    task = FileSizeCountTask(store, max_file_size_upper_bound=args.max_file_size)
    state = task.new_state()

    try:
        if args.command == "reprocess":
            logger.info("Scanning %s for objects...", args.root)
            name, ok = task.reprocess(DirectoryCatalogTable(args.root), state=state)
        else:
            name, ok = task.process(batch.filter(task.task_tables), state=state)
    finally:
        engine.dispose()

    logger.info(
        "%s finished: success=%s objects=%d anomalies=%d",
        name,
        ok,
        state.total(),
        state.anomalies,
    )
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
