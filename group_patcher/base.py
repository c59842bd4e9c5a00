"""
BaseScript — abstract base class for all group_patcher command-line scripts.

Provides:
  - Rotating file logger + stderr handler, scoped to <log dir>/<script>.log
  - Shared --debug, --credentials-file and --token-file flags
  - Abstract run() method that must return a JSON-serialisable dict
  - main() classmethod: parses args, runs the script, prints JSON to stdout
  - Automatic elapsed-time logging

Subclass usage:
    class MyScript(BaseScript):
        @classmethod
        def add_arguments(cls, parser):
            parser.add_argument("--domain")

        def run(self) -> dict:
            self.logger.info("doing work for %s...", self.args.domain)
            return {"result": "done"}

    if __name__ == "__main__":
        MyScript.main()
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from abc import ABC, abstractmethod
from logging.handlers import RotatingFileHandler
from typing import Any, Optional, Sequence

from . import config


class BaseScript(ABC):
    """Abstract base for all group_patcher scripts."""

    def __init__(self, args: argparse.Namespace, log_level: int = logging.INFO) -> None:
        # Derive script name from the concrete class name (lowercased)
        self.script_name: str = type(self).__name__.lower()
        self.args = args
        self.logger: logging.Logger = self._setup_logger(log_level)

    # ── Logging ───────────────────────────────────────────────────────────────

    def _setup_logger(self, log_level: int) -> logging.Logger:
        """
        Configure the script logger and the group_patcher library logger to write to:
          - <log dir>/<script_name>.log  (rotating, max 2 MB × 5 backups)
          - stderr (stdout is reserved for the JSON result)
        """
        logs_dir = config.logs_dir()
        logs_dir.mkdir(parents=True, exist_ok=True)

        logger = logging.getLogger(self.script_name)
        library_logger = logging.getLogger("group_patcher")
        logger.setLevel(log_level)
        library_logger.setLevel(log_level)

        # Avoid adding duplicate handlers if the script runs twice in one process
        if logger.handlers:
            return logger

        fmt = logging.Formatter(
            "%(asctime)s [%(levelname)-8s] %(name)s — %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        file_handler = RotatingFileHandler(
            logs_dir / f"{self.script_name}.log",
            maxBytes=2_000_000,   # 2 MB per file
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(fmt)

        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(fmt)

        logger.addHandler(file_handler)
        logger.addHandler(stream_handler)
        # The library logger follows whichever script configured it first
        if not library_logger.handlers:
            library_logger.addHandler(file_handler)
            library_logger.addHandler(stream_handler)
        return logger

    # ── Abstract interface ────────────────────────────────────────────────────

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Hook for subclasses to register their own command-line arguments."""

    @abstractmethod
    def run(self) -> dict[str, Any]:
        """
        Execute the script.

        Must return a dict that is JSON-serialisable (str keys, JSON-safe values).
        datetime objects are serialised via default=str.
        """

    # ── CLI entrypoint ────────────────────────────────────────────────────────

    @classmethod
    def build_parser(cls) -> argparse.ArgumentParser:
        doc = (cls.__doc__ or cls.__name__).strip().splitlines()[0]
        parser = argparse.ArgumentParser(description=doc)
        parser.add_argument(
            "--debug", action="store_true", help="Enable DEBUG-level logging"
        )
        parser.add_argument(
            "--credentials-file", metavar="PATH", default=None,
            help="OAuth client secrets JSON (default: $GROUP_PATCHER_CREDENTIALS_FILE "
                 f"or {config.DEFAULT_CREDENTIALS_FILE})",
        )
        parser.add_argument(
            "--token-file", metavar="PATH", default=None,
            help="Token cache file (default: $GROUP_PATCHER_TOKEN_FILE "
                 f"or {config.DEFAULT_TOKEN_FILE})",
        )
        cls.add_arguments(parser)
        return parser

    @classmethod
    def main(cls, argv: Optional[Sequence[str]] = None) -> None:
        """
        Standard CLI entrypoint. Wire up as:
            if __name__ == "__main__":
                MyScript.main()

        Parses arguments, instantiates the script, calls run(), prints JSON.
        Exits with status 1 if run() raises.
        """
        args = cls.build_parser().parse_args(argv)

        log_level = logging.DEBUG if args.debug else logging.INFO
        script = cls(args, log_level=log_level)

        t0 = time.monotonic()
        try:
            result = script.run()
        except Exception:
            elapsed = time.monotonic() - t0
            script.logger.exception("%s failed after %.2fs", cls.__name__, elapsed)
            sys.exit(1)

        elapsed = time.monotonic() - t0
        script.logger.info("Completed in %.2fs", elapsed)
        print(json.dumps(result, indent=2, default=str))
