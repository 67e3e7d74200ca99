"""CLI action handler.

Purpose
-------
Turns parsed arguments into one streamed generation (or one token count),
keeping the entrypoint module minimal. This module has no top-level side
effects and is safe to import in tests; streams and the client factory are
injectable.

Output contract
---------------
- Generated text goes to stdout as it arrives, flushed per event, and the
  output ends with a newline.
- On failure the partial text stays on stdout and one error line goes to
  stderr.
- Exit codes: ``0`` success, ``1`` service error, ``2`` any other failure
  (transport, decode, schema, config), ``130`` interrupted.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Callable, Optional, TextIO

from ...base.errors import ErrorKind, StreamError
from ...base.logging import LogContext, configure_logger, get_logger, normalized_log_event
from ...base.streaming import StreamController
from ...config.defaults import CLI_DEFAULT_PROMPT
from ...gemini import GeminiStreamClient, GenerationConfig
from .cli_utils import format_error, read_prompt

EXIT_OK = 0
EXIT_SERVICE_ERROR = 1
EXIT_FAILURE = 2
EXIT_INTERRUPTED = 130


def exit_code_for(error: Optional[StreamError]) -> int:
    """Map a terminal error (or success) to the process exit code."""
    if error is None:
        return EXIT_OK
    if error.kind is ErrorKind.SERVICE:
        return EXIT_SERVICE_ERROR
    if error.kind is ErrorKind.CANCELLED:
        return EXIT_INTERRUPTED
    return EXIT_FAILURE


def _generation_config(args: argparse.Namespace) -> Optional[GenerationConfig]:
    fields = {}
    if args.temperature is not None:
        fields["temperature"] = args.temperature
    if args.max_output_tokens is not None:
        fields["max_output_tokens"] = args.max_output_tokens  # nosec B106 - API parameter name
    return GenerationConfig(**fields) if fields else None


def _stream_text(controller: StreamController, stdout: TextIO) -> Optional[StreamError]:
    """Write deltas as they arrive; return the terminal error, if any."""
    error: Optional[StreamError] = None
    for event in controller:
        if event.delta:
            stdout.write(event.delta)
            stdout.flush()
        if event.finish:
            error = event.error
    stdout.write("\n")
    stdout.flush()
    return error


def _count_tokens(client: GeminiStreamClient, prompt: str, stdout: TextIO) -> None:
    stdout.write(f"{client.count_tokens(prompt)}\n")
    stdout.flush()


def handle_run(
    args: argparse.Namespace,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
    client_factory: Callable[..., GeminiStreamClient] = GeminiStreamClient,
) -> int:
    """Execute one CLI invocation.

    Parameters
    ----------
    args: argparse.Namespace
        Parsed arguments from ``build_parser``.
    stdin, stdout, stderr: Optional[TextIO]
        Streams; default to the ``sys`` streams at call time.
    client_factory: Callable
        Builds the client from keyword overrides (tests inject a client on
        ``httpx.MockTransport``).

    Returns
    -------
    int
        Process exit code (see module docstring).
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    if args.log_level is not None or args.log_file is not None:
        configure_logger(level=args.log_level, file_path=args.log_file)
    logger = get_logger("gemini_stream.cli")

    controller: Optional[StreamController] = None
    ctx = LogContext(model=args.model)
    try:
        client = client_factory(model=args.model, max_element_bytes=args.max_element_bytes)
        ctx = LogContext(model=client.model)
        prompt = read_prompt(args.prompt, stdin, CLI_DEFAULT_PROMPT)
        if args.count_tokens:
            _count_tokens(client, prompt, stdout)
            code = EXIT_OK
        else:
            controller = client.stream_generate(prompt, generation_config=_generation_config(args))
            if args.json:
                result = controller.run()
                stdout.write(json.dumps(result.to_dict(), ensure_ascii=False) + "\n")
                stdout.flush()
                error = result.error
            else:
                error = _stream_text(controller, stdout)
            if error is not None:
                stderr.write(format_error(error) + "\n")
            code = exit_code_for(error)
    except StreamError as exc:
        # Raised before streaming starts (config) or by count_tokens.
        stderr.write(format_error(exc) + "\n")
        code = exit_code_for(exc)
    except KeyboardInterrupt:
        if controller is not None:
            controller.cancel("interrupted")
        stdout.write("\n")
        stdout.flush()
        stderr.write("error[cancelled]: interrupted\n")
        code = EXIT_INTERRUPTED
    normalized_log_event(
        logger,
        "cli.run",
        ctx,
        phase="finalize",
        exit_code=code,
        count_tokens=bool(args.count_tokens),
        json_output=bool(args.json),
    )
    return code


__all__ = [
    "handle_run",
    "exit_code_for",
    "EXIT_OK",
    "EXIT_SERVICE_ERROR",
    "EXIT_FAILURE",
    "EXIT_INTERRUPTED",
]
