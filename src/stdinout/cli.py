"""CLI entry point: copy INPUT (default stdin) to OUTPUT (default stdout)."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any, Sequence

from stdinout import __version__
from stdinout.config import load_config
from stdinout.streams import InputSource, OutputSink, copy_stream

logger = logging.getLogger(__name__)


def setup_logging(config: dict[str, Any], verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the package logger: level from --verbose/--quiet or config, stderr handler,
    optional file handler from config. Never logs to stdout, which may carry data.
    """
    log_cfg = config.get("logging") or {}
    if verbose:
        level_name = "DEBUG"
    elif quiet:
        level_name = "ERROR"
    else:
        level_name = (log_cfg.get("level") or "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    root = logging.getLogger("stdinout")
    root.setLevel(level)
    if not root.handlers:
        fmt = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(fmt)
        root.addHandler(console)
        log_file = log_cfg.get("file")
        if log_file:
            try:
                fh = logging.FileHandler(Path(log_file).expanduser(), encoding="utf-8")
                fh.setFormatter(fmt)
                root.addHandler(fh)
            except OSError:
                logger.warning("Cannot open log file %s; logging to stderr only", log_file)


def run(args: Namespace) -> None:
    """Copy the selected input to the selected output; exit 1 if either cannot be opened."""
    dash_is_stdio = getattr(args, "dash_is_stdio", True)
    chunk_size = getattr(args, "chunk_size", 65536)
    source = InputSource.from_arg(getattr(args, "input", None), dash_is_stdio=dash_is_stdio)
    sink = OutputSink.from_arg(getattr(args, "output", None), dash_is_stdio=dash_is_stdio)
    logger.info("Copying %s -> %s", source, sink)

    try:
        with source.open() as src, sink.open() as dst:
            copied = copy_stream(src, dst, chunk_size=chunk_size)
    except BrokenPipeError:
        if not sink.is_standard:
            print(f"Error: broken pipe writing {sink}", file=sys.stderr)
            sys.exit(1)
        # Reader went away (e.g. piped into head); keep interpreter shutdown from flushing into it
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        sys.exit(0)
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    logger.info("Copied %d bytes", copied)


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="stdinout",
        description="Copy INPUT to OUTPUT, using stdin/stdout when a path is omitted.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("input", nargs="?", default=None, help="Input file (default: stdin).")
    parser.add_argument("output", nargs="?", default=None, help="Output file (default: stdout).")
    parser.add_argument("--config", type=Path, default=None, help="Config file (default: ~/.stdinout/config.json).")
    parser.add_argument(
        "--no-dash",
        dest="no_dash",
        action="store_true",
        help="Treat '-' as a literal filename instead of stdin/stdout.",
    )
    parser.add_argument("--chunk-size", type=int, default=None, help="Bytes per read (default: from config, 65536).")
    log_group = parser.add_mutually_exclusive_group()
    log_group.add_argument("-v", "--verbose", action="store_true", help="Verbose (DEBUG) output.")
    log_group.add_argument("-q", "--quiet", action="store_true", help="Quiet (errors only).")

    args = parser.parse_args(argv)
    config = load_config(args.config)
    setup_logging(config, verbose=args.verbose, quiet=args.quiet)

    if args.chunk_size is None:
        configured = config.get("chunk_size", 65536)
        try:
            args.chunk_size = int(configured)
        except (TypeError, ValueError):
            parser.error(f"chunk_size in config must be a positive integer, got {configured!r}")
        if args.chunk_size <= 0:
            parser.error(f"chunk_size in config must be a positive integer, got {configured!r}")
    elif args.chunk_size <= 0:
        parser.error("--chunk-size must be a positive integer")
    args.dash_is_stdio = False if args.no_dash else bool(config.get("dash_is_stdio", True))

    run(args)


if __name__ == "__main__":
    main()
