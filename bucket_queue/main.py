# main.py

"""Command line driver that orders ``priority value`` lines through a queue."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from typing import IO, Iterable, List, Tuple

from bucket_queue.config import Config
from bucket_queue.errors import PriorityError
from bucket_queue.queue import BucketQueue

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure logging from :attr:`Config.logging` and log uncaught errors."""

    opts = Config.logging
    kwargs = {
        "level": getattr(logging, str(opts.get("level", "WARNING")).upper()),
        "format": opts.get("format"),
        "force": True,
    }
    if opts.get("file"):
        kwargs["filename"] = opts["file"]
        kwargs["filemode"] = "a"
    logging.basicConfig(**kwargs)

    def _log_excepthook(exc_type, exc, tb) -> None:
        logging.getLogger(__name__).exception(
            "Uncaught exception", exc_info=(exc_type, exc, tb)
        )

    sys.excepthook = _log_excepthook


def parse_line(line: str) -> Tuple[int, str] | None:
    """Split ``"<priority> <value>"`` into its parts.

    Blank lines and ``#`` comments yield ``None``. The value is the rest of
    the line with surrounding whitespace stripped and may be empty.

    Raises
    ------
    ValueError
        If the priority is not an integer.
    """

    text = line.strip()
    if not text or text.startswith("#"):
        return None
    head, _, rest = text.partition(" ")
    return int(head), rest.strip()


@dataclass
class MainService:
    """Handle CLI parsing and run the queue over the input lines."""

    argv: list[str] | None = None

    def run(self, stdin: IO[str] | None = None, stdout: IO[str] | None = None) -> int:
        args = self._parse_args()
        _configure_logging()
        queue: BucketQueue[Tuple[int, str]] = BucketQueue(args.slots)

        if args.input:
            with open(args.input) as fh:
                rejected = self.fill(queue, fh)
        else:
            rejected = self.fill(queue, stdin or sys.stdin)

        out = stdout or sys.stdout
        for priority, value in queue.drain():
            out.write(f"{priority}\t{value}\n")
        return 1 if rejected else 0

    # ------------------------------------------------------------------
    @staticmethod
    def fill(queue: BucketQueue, lines: Iterable[str]) -> int:
        """Push every parsable line into ``queue``; return the rejected count."""

        rejected = 0
        for lineno, line in enumerate(lines, 1):
            try:
                parsed = parse_line(line)
            except ValueError:
                logger.warning("line %d: malformed entry %r", lineno, line.rstrip())
                rejected += 1
                continue
            if parsed is None:
                continue
            priority, value = parsed
            try:
                queue.push(priority, (priority, value))
            except PriorityError as exc:
                logger.warning("line %d: %s", lineno, exc)
                rejected += 1
        logger.info("queued %d values, rejected %d", len(queue), rejected)
        return rejected

    # ------------------------------------------------------------------
    def _parse_args(self) -> argparse.Namespace:
        parser = argparse.ArgumentParser(
            prog="bucket-queue",
            description="Print 'priority value' lines in bucket queue order.",
        )
        parser.add_argument("--config", help="Path to JSON or YAML configuration")
        parser.add_argument("--slots", type=int, help="Number of priority levels")
        parser.add_argument("--input", help="Read entries from this file")
        args = parser.parse_args(self.argv)
        if args.config:
            if not os.path.exists(args.config):
                parser.error(f"config file not found: {args.config}")
            Config.load_from_file(args.config)
        if args.slots is None:
            slots = Config.priority_slots
            if isinstance(slots, bool) or not isinstance(slots, int) or slots < 0:
                parser.error(
                    f"priority_slots must be a non-negative integer, got {slots!r}"
                )
            args.slots = slots
        elif args.slots < 0:
            parser.error("--slots must be non-negative")
        return args


def main(argv: List[str] | None = None) -> None:
    """Console entrypoint for ``bucket-queue``."""

    raise SystemExit(MainService(argv=argv).run())


if __name__ == "__main__":
    main()
