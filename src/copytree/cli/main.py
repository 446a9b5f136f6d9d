"""Command-line interface for copytree.

This module provides the ``copytree`` command: it parses arguments, builds the
run configuration, produces the snapshot and delivers it to the clipboard,
standard output or a file.

Signal Handling Notes:
    - SIGPIPE: Handled when the output pipe is closed (e.g., when piping to `head`) on Unix-like systems
    - SIGINT: Handled for clean exit on Ctrl+C
    Both cases stop writing and exit with the conventional status.

Exit Codes:
    0: Successful completion
    1: Runtime error: no readable root, delivery failure, missing tokenizer
    2: Invalid arguments or configuration
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe (SIGPIPE) on Unix-like systems

Example:
    # Copy the current directory to the clipboard
    $ copytree

    # Print to stdout without the built-in content cap
    $ copytree --stdout --max-file-bytes 0 src
"""

import logging
import sys
from collections.abc import Mapping
from typing import Optional, Sequence

from humanfriendly import format_size

from copytree.cli.argparser import build_filter_spec, build_redaction_rules, create_parser, validate_args
from copytree.cli.signal_handler import setup_signal_handling, signal_handler
from copytree.copytree import CopyTree
from copytree.exceptions import CopyTreeError, RunInterruptedError, TokenizerNotAvailableError
from copytree.output_sinks import resolve_sink

LOG_FORMAT = "%(levelname)s: %(message)s"

logger = logging.getLogger("copytree")


def configure_logging(verbosity: int = 0, quiet: bool = False) -> None:
    """Send copytree's log records to stderr at the requested level.

    Args:
        verbosity: 0 for warnings, 1 for info, 2 or more for debug.
        quiet: Only report errors. Takes precedence over verbosity.
    """
    if quiet:
        level = logging.ERROR
    elif verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)


def format_counts(counts: Mapping[str, Optional[int]]) -> str:
    """Format the counts into a human-readable string.

    Args:
        counts: Mapping containing various count metrics.

    Returns:
        A formatted string showing all counts with appropriate labels.

    Example:
        >>> print(format_counts({"directories": 1, "files": 3, "included": 2, "binary": 1,
        ...     "excluded": 0, "capped": 0, "unreadable": 0, "omitted": 0,
        ...     "bytes": 2048, "lines": 40, "characters": 2000, "tokens": None}))
        Directories: 1
        Files: 3 (2 included)
        Skipped: 1 binary, 0 excluded, 0 unreadable
        Capped: 0
        Omitted by total limit: 0
        Size: 2.05 KB
        Lines: 40
        Characters: 2000
    """
    result = [
        f"Directories: {counts['directories']}",
        f"Files: {counts['files']} ({counts['included']} included)",
        f"Skipped: {counts['binary']} binary, {counts['excluded']} excluded, {counts['unreadable']} unreadable",
        f"Capped: {counts['capped']}",
        f"Omitted by total limit: {counts['omitted']}",
        f"Size: {format_size(counts['bytes'] or 0)}",
        f"Lines: {counts['lines']}",
        f"Characters: {counts['characters']}",
    ]

    if counts["tokens"] is not None:
        result.insert(6, f"Tokens: {counts['tokens']}")

    return "\n".join(result)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the copytree command-line interface.

    Args:
        argv: Arguments to parse instead of ``sys.argv[1:]``.

    Exit codes:
        0: Successful completion
        1: Runtime error during execution
        2: Invalid arguments or configuration
        130: Interrupted by SIGINT (Ctrl+C)
        141: Broken pipe (SIGPIPE) on Unix-like systems
    """
    setup_signal_handling()

    # argparse exits with status 2 on usage errors and 0 for --version
    args = create_parser().parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    try:
        validate_args(args)
        sink = resolve_sink(clipboard=args.clipboard, stdout=args.stdout, out=args.out)
        snapshot = CopyTree(
            args.paths,
            build_filter_spec(args),
            redaction_rules=build_redaction_rules(args),
            fence=args.fence,
            annotate=args.annotate,
            tokenizer_model=args.tokenizer,
        )
    except TokenizerNotAvailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        # ConfigurationError, an unknown tokenizer model, an unknown fence style
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        snapshot.run(sink)
    except BrokenPipeError:
        pass  # exit status is derived from the received signal below
    except RunInterruptedError:
        # Stopped before delivery, nothing was written anywhere
        sys.exit(signal_handler.exit_code() or 130)
    except CopyTreeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    # Handle exit codes based on received signals
    exit_code = signal_handler.exit_code()
    if exit_code is not None:
        sys.exit(exit_code)

    if not args.quiet:
        message = sink.describe()
        if message:
            print(message, file=sys.stderr)

    if args.summary or args.tokenizer:
        print(format_counts(snapshot.counts), file=sys.stderr)


if __name__ == "__main__":
    main()
