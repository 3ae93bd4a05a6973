#!/usr/bin/env python3
"""
Convert Script.

Read the eight airfoil vector files from the working directory and write
a 4-axis hot-wire G-code program.

Usage:
    python -m foamcut
    python -m foamcut.scripts.convert --config my_cutter.yaml
    python -m foamcut.scripts.convert --verbose

Input files (working directory):
    ROOTUPPERX ROOTUPPERY ROOTLOWERX ROOTLOWERY
    TIPUPPERX  TIPUPPERY  TIPLOWERX  TIPLOWERY

Output:
    OUTPUT.txt (truncated if present)

Exit status is 0 on success and 1 on any fatal error.  Errors and
notes are written to stderr.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from foamcut.configs.loader import ConfigError, load_config
from foamcut.errors import FoamcutError, fatal_message
from foamcut.pipeline import run_conversion
from foamcut.utils.logging_config import push_context, setup_logging

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Convert airfoil vector files to 4-axis hot-wire G-code"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Reads ROOT/TIP x UPPER/LOWER x X/Y files from the working directory.",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Cutter configuration file (YAML)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log per-file counts and the output summary",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(log_level="WARNING", context={"app": "foamcut"})

    try:
        config = load_config(args.config)
    except (ConfigError, FileNotFoundError) as e:
        logger.error("Error loading config: %s", e)
        return EXIT_FAILURE

    if args.config:
        push_context(profile=Path(args.config).name)

    log_cfg = config.logging
    setup_logging(
        log_level="DEBUG" if args.verbose else log_cfg.level,
        log_file=log_cfg.file,
        json=log_cfg.json,
        color=log_cfg.color,
    )

    try:
        result = run_conversion(config)
    except FoamcutError as e:
        logger.error(fatal_message(e))
        logger.debug("Conversion failed", exc_info=True)
        return EXIT_FAILURE

    logger.debug("G-code written to %s", result.output_path)
    return EXIT_SUCCESS


if __name__ == "__main__":
    raise SystemExit(main())
