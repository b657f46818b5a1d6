"""Converts U.S. Congress BILLSTATUS bulk data into bill records."""

import logging
import sys
from argparse import ArgumentParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import requests
from dotenv import load_dotenv

from components.interfaces import (
    Config,
    LocalObjectStore,
    cleanup_session,
    get_session,
    record_key,
)
from components.models import BillStatusError
from components.pipeline import BatchResult, sync_bill_type, to_json, transform_document

logger = logging.getLogger(__name__)


@dataclass
class Mode:
    """Command-line arguments"""

    command: Optional[str] = None
    """Subcommand to run"""
    paths: list[str] = field(default_factory=list)
    """BILLSTATUS XML files to transform"""
    store: bool = False
    """Write records to storage instead of stdout"""
    congress: list[int] = field(default_factory=list)
    """Congresses to sync (defaults to sync.congresses)"""
    bill_type: list[str] = field(default_factory=list)
    """Bill types to sync (defaults to sync.bill_types)"""
    config: str = "config.yaml"
    """Path to the configuration file"""


def transform_files(cfg: Config, paths: list[str], store: bool) -> int:
    """Transform XML files, printing records or writing them to storage."""
    storage = LocalObjectStore(cfg.storage.root)
    failures = 0
    for path in paths:
        try:
            record = transform_document(Path(path).read_bytes(), cfg.base_url)
        except (OSError, BillStatusError) as e:
            logger.error("Failed to transform %s: %s", path, e)
            failures += 1
            continue
        body = to_json(record)
        if store:
            key = record_key(
                record["congress"], record["bill_type"], record["number"], cfg.storage.prefix
            )
            storage.put(key, body, "application/json")
            logger.info("Stored %s", key)
        else:
            sys.stdout.write(body.decode("utf-8") + "\n")
    return 1 if failures else 0


def sync(cfg: Config, congresses: list[int], bill_types: list[str]) -> int:
    """Fetch and transform every changed document for each bill type."""
    storage = LocalObjectStore(cfg.storage.root)
    session = get_session(cfg.sync.retries)
    total = BatchResult()
    try:
        for congress in congresses:
            for bill_type in bill_types:
                try:
                    result = sync_bill_type(
                        session,
                        storage,
                        congress,
                        bill_type,
                        cfg.base_url,
                        cfg.storage.prefix,
                        cfg.sync.timeout,
                    )
                except (requests.RequestException, ValueError) as e:
                    logger.error("Sync of %s-%s failed: %s", bill_type, congress, e)
                    total.failures[f"{bill_type}-{congress}"] = str(e)
                    continue
                total.merge(result)
    finally:
        cleanup_session()
    logger.info(
        "Sync done: %d transformed, %d failed", len(total.processed), len(total.failures)
    )
    return 0 if total.ok else 1


def main(cfg: Config, mode: Mode) -> int:
    """Entry point for the bill status pipeline"""
    match mode:
        case Mode(command="transform", paths=paths, store=store):
            return transform_files(cfg, paths, store)
        case Mode(command="sync"):
            congresses = mode.congress or cfg.sync.congresses
            if not congresses:
                logger.error("No congress given and sync.congresses is empty")
                return 2
            return sync(cfg, congresses, mode.bill_type or cfg.sync.bill_types)
        case _:
            return 2


if __name__ == "__main__":
    load_dotenv()
    parser = ArgumentParser(description="U.S. Congress BILLSTATUS transformer")
    parser.add_argument("-c", "--config", default="config.yaml", help="Path to the configuration file")
    commands = parser.add_subparsers(dest="command", required=True)

    transform_parser = commands.add_parser("transform", help="Transform BILLSTATUS XML files")
    transform_parser.add_argument("paths", nargs="+", metavar="PATH", help="BILLSTATUS XML files to transform")
    transform_parser.add_argument("--store", action="store_true", help="Write records to storage instead of stdout")

    sync_parser = commands.add_parser("sync", help="Sync changed documents from govinfo")
    sync_parser.add_argument(
        "--congress", type=int, action="append", default=[], metavar="N", help="Congress to sync (repeatable)"
    )
    sync_parser.add_argument(
        "--bill-type", action="append", default=[], metavar="TYPE", help="Bill type to sync (repeatable)"
    )

    args = parser.parse_args()
    config = Config(args.config)
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(threadName)-12s] %(levelname)-8s %(message)s",
    )
    sys.exit(main(config, Mode(**vars(args))))
