"""Command-line argument parsing for copytree.

This module defines the command-line interface for copytree and turns the
parsed arguments into the validated run configuration.
"""

import argparse
from pathlib import Path
from typing import List

from copytree import __version__
from copytree.exceptions import ConfigurationError
from copytree.fence_strategies import FENCE_STRATEGIES
from copytree.filter_spec import (
    DEFAULT_MAX_FILE_BYTES,
    FilterSpec,
    RedactionRule,
    parse_file_size,
    parse_redaction_rule,
)


def size_argument(value: str) -> int:
    """argparse type for human-readable byte sizes such as ``16KiB`` or ``1MB``."""
    try:
        return parse_file_size(value)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(str(e))


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        An ArgumentParser instance configured with copytree's options.
    """
    description = """
    copytree: Snapshot directory trees and file contents as one block of text.

    The output starts with a tree of every root, followed by the contents of the
    included files, each under a "--- path ---" header. By default the result is
    copied to the clipboard, ready to paste into a chat or a language model.

    Visibility and content are controlled separately:
    - Ignore rules (.gitignore, .ignore, built-in defaults, --ignore) hide entries
      from the tree and from the content.
    - Exclude and include patterns (-x, -I) only decide which files contribute
      content; the tree still lists them.
    - Binary files are left out and large files are cut at --max-file-bytes.
    """

    epilog = """
    Examples:
      # Copy the current directory to the clipboard
      copytree

      # Print two roots to stdout
      copytree --stdout src tests

      # Keep docs in the tree but leave their content out
      copytree -x "docs/*" "*.md" -- src

      # Only Python files contribute content
      copytree -I "*.py" --fence markdown .

      # Write to a file with an overall limit, scrubbing API keys
      copytree -o snapshot.txt --max-total-bytes 200KB --redact "sk-[A-Za-z0-9]+=>[KEY]" .

      # Show skip reasons in the tree and a summary with token count
      copytree --annotate -s -t gpt-4 .
    """

    parser = argparse.ArgumentParser(
        prog="copytree",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"copytree {__version__}", help="Show the version and exit"
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        default=[Path(".")],
        metavar="PATH",
        help="Directories or files to snapshot, in output order (default: current directory).",
    )

    filters = parser.add_argument_group("filtering")
    filters.add_argument(
        "-x",
        "--exclude",
        nargs="+",
        action="extend",
        default=[],
        metavar="PATTERN",
        help=(
            "Gitignore-style glob; matching files stay in the tree but contribute no content. "
            "Takes values until the next option or '--', and can be repeated."
        ),
    )
    filters.add_argument(
        "-I",
        "--include",
        nargs="+",
        action="extend",
        default=[],
        metavar="PATTERN",
        help="Gitignore-style glob allowlist; when given, only matching files contribute content.",
    )
    filters.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="PATTERN",
        help=(
            "Extra gitignore-style rule that hides entries from the tree, evaluated after every ignore "
            "file. Negations ('!pattern') re-include. Can be repeated."
        ),
    )
    filters.add_argument(
        "--no-gitignore",
        action="store_true",
        help="Do not read .gitignore or .ignore files. The built-in default ignores still apply.",
    )
    filters.add_argument(
        "--skip-binary",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Leave out the content of files whose leading bytes look binary.",
    )
    filters.add_argument(
        "-L",
        "--follow-symlinks",
        action="store_true",
        help="Follow symbolic links during traversal. By default they are skipped.",
    )

    limits = parser.add_argument_group("limits")
    limits.add_argument(
        "--max-file-bytes",
        type=size_argument,
        default=DEFAULT_MAX_FILE_BYTES,
        metavar="SIZE",
        help=(
            "Cut each file's content at SIZE bytes, e.g. 16KiB or 1MB; "
            f"0 disables (default: {DEFAULT_MAX_FILE_BYTES})."
        ),
    )
    limits.add_argument(
        "--max-total-bytes",
        type=size_argument,
        default=0,
        metavar="SIZE",
        help="Stop adding file contents once the combined size would exceed SIZE; 0 disables (default: 0).",
    )

    output = parser.add_argument_group("output")
    destination = output.add_mutually_exclusive_group()
    destination.add_argument("--clipboard", action="store_true", help="Copy the result to the clipboard (default).")
    destination.add_argument("--stdout", action="store_true", help="Write the result to standard output.")
    destination.add_argument("-o", "--out", type=Path, metavar="FILE", help="Write the result to FILE.")
    output.add_argument(
        "--fence",
        choices=list(FENCE_STRATEGIES),
        default="none",
        help="Delimiters around each file's content (default: none).",
    )
    output.add_argument(
        "--redact",
        action="append",
        default=[],
        metavar="PATTERN[=>TOKEN]",
        help="Replace every match of a regular expression with TOKEN (default: [REDACTED]). Can be repeated.",
    )
    output.add_argument(
        "--annotate",
        action="store_true",
        help="Append the reason a file contributes no or partial content to its tree line.",
    )

    report = parser.add_argument_group("reporting")
    report.add_argument(
        "-s",
        "--summary",
        action="store_true",
        help="Print a summary of files, sizes and counts to stderr.",
    )
    report.add_argument(
        "-t",
        "--tokenizer",
        metavar="MODEL",
        help="Tokenizer model used to count tokens in the summary (e.g., gpt-4). Implies --summary.",
    )
    report.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Report skipped files (-v) and traversal details (-vv) on stderr.",
    )
    report.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report errors.",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs additional validation beyond what argparse can handle.

    Args:
        args: Parsed command-line arguments.

    Raises:
        ConfigurationError: If any arguments fail validation.
    """
    if args.verbose and args.quiet:
        raise ConfigurationError("-v/--verbose and -q/--quiet cannot be combined")
    if args.out is not None and args.out.is_dir():
        raise ConfigurationError(f"Output path '{args.out}' is a directory")
    if not args.paths:
        raise ConfigurationError("At least one path is required")


def build_filter_spec(args: argparse.Namespace) -> FilterSpec:
    """Turn parsed arguments into the run's filter policy.

    Raises:
        ConfigurationError: If a pattern is malformed.
    """
    return FilterSpec(
        use_ignore_files=not args.no_gitignore,
        ignore_patterns=args.ignore,
        exclude_patterns=args.exclude,
        include_patterns=args.include,
        skip_binary=args.skip_binary,
        max_file_bytes=args.max_file_bytes,
        max_total_bytes=args.max_total_bytes,
        follow_symlinks=args.follow_symlinks,
    )


def build_redaction_rules(args: argparse.Namespace) -> List[RedactionRule]:
    """Compile the --redact options, in command-line order.

    Raises:
        ConfigurationError: If a regular expression is malformed.
    """
    return [parse_redaction_rule(value) for value in args.redact]
