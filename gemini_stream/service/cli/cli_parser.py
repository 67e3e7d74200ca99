"""CLI parser construction for gemini-stream.

This module wires argument shapes but contains no execution logic. The
handler lives in ``cli_actions`` to keep files small and testable.
"""

from __future__ import annotations

import argparse

from .cli_utils import parse_verbosity


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {parsed}")
    return parsed


def _log_level(value: str) -> str:
    level = parse_verbosity(value)
    if level is None:
        raise argparse.ArgumentTypeError(f"unknown log level {value!r}")
    return level


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI parser.

    Returns
    -------
    argparse.ArgumentParser
        Parser for the single streaming command. No I/O happens here.
    """
    p = argparse.ArgumentParser(
        prog="gemini-stream",
        description=(
            "Stream a Gemini generation to stdout. The prompt comes from --prompt, "
            "else from stdin when it is piped, else a built-in default."
        ),
    )
    p.add_argument("--model", default=None, help="model name (default: config / GEMINI_MODEL / gemini-pro)")
    p.add_argument("--prompt", default=None)
    p.add_argument("--temperature", type=float, default=None)
    p.add_argument("--max-output-tokens", type=_positive_int, default=None)
    p.add_argument(
        "--max-element-bytes",
        type=_positive_int,
        default=None,
        help="upper bound on one response element (default 1 MiB)",
    )
    p.add_argument("--count-tokens", action="store_true", help="print the prompt's token count and exit")
    p.add_argument("--log-level", type=_log_level, default=None, help="DEBUG, INFO, WARNING, ERROR or a synonym")
    p.add_argument("--log-file", default=None, help="also write JSON logs to a rotating file")
    p.add_argument("--json", action="store_true", help="print the final result as JSON instead of streaming text")
    return p


__all__ = ["build_parser"]
