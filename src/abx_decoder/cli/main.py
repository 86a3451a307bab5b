"""Main CLI entry point for the abx2xml command-line tool.

Converts an Android Binary XML file into indented markup, writing to a file
next to the input, to an explicit path, over the input itself (``-i``) or to
stdout (``-``).
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from abx_decoder import __version__
from abx_decoder.api import AbxDecoder
from abx_decoder.shared import (
    ConfigError,
    ConverterConfig,
    configure_logging,
    get_logger,
)

STDOUT_MARKER = "-"
OUTPUT_SUFFIX = ".xml"


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the abx2xml argument parser."""
    parser = argparse.ArgumentParser(
        prog="abx2xml",
        description="Converts Android Binary XML (ABX) to human-readable XML.",
        epilog=(
            "When invoked with -i and no output, a successful conversion "
            "overwrites the input file. output can be '-' to use stdout."
        ),
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("input", type=Path, help="ABX file to convert")
    parser.add_argument(
        "output",
        nargs="?",
        help="Output path, or '-' for stdout (default: input with .xml extension)",
    )
    parser.add_argument(
        "-mr", "--multi-root",
        action="store_true",
        help="Enable multi-root processing (top-level elements under <root>)",
    )
    parser.add_argument(
        "-i", "--in-place",
        action="store_true",
        help="Overwrite the input file when no output is given",
    )
    parser.add_argument(
        "--escape",
        action="store_true",
        help="Escape reserved characters in text and attribute values",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file (see ConverterConfig.to_json)",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log decoding details",
    )
    verbosity.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log errors",
    )

    return parser


def resolve_output_path(input_path: Path, output: Optional[str], in_place: bool) -> str:
    """Work out where the converted markup goes.

    Returns:
        ``"-"`` for stdout, otherwise the output file path as a string
    """
    if output:
        return output
    if in_place:
        return str(input_path)
    return str(input_path.with_name(input_path.stem + OUTPUT_SUFFIX))


def load_config(args: argparse.Namespace) -> ConverterConfig:
    """Build the converter configuration from an optional file plus flags."""
    config = (
        ConverterConfig.from_json(args.config.read_text(encoding="utf-8"))
        if args.config
        else ConverterConfig.default()
    )

    overrides = {}
    if args.multi_root:
        overrides["decoder__multi_root"] = True
    if args.escape:
        overrides["render__escape_markup"] = True
    return config.override(**overrides) if overrides else config


def write_output(markup: str, destination: str) -> None:
    """Write rendered markup to a file or stdout.

    Text that was decoded with ``surrogateescape`` is written back as the
    original bytes.
    """
    if destination == STDOUT_MARKER:
        stream = sys.stdout
        buffer = getattr(stream, "buffer", None)
        if buffer is None:
            stream.write(markup)
            return
        stream.flush()
        buffer.write(markup.encode("utf-8", "surrogateescape"))
        buffer.flush()
        return

    with open(destination, "w", encoding="utf-8", errors="surrogateescape",
              newline="") as output_file:
        output_file.write(markup)


def cmd_convert(args: argparse.Namespace) -> int:
    """Decode the input and write its markup."""
    logger = get_logger(__name__, None, "cli")
    destination = resolve_output_path(args.input, args.output, args.in_place)

    try:
        config = load_config(args)
    except (ConfigError, OSError, ValueError) as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return 1

    decoder = AbxDecoder(config)
    result = decoder.decode(args.input)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    # Output is only opened once decoding succeeded, so -i never truncates on failure
    try:
        write_output(decoder.render(result.document), destination)
    except OSError as e:
        print(f"Error: Could not write output '{destination}': {e}", file=sys.stderr)
        return 1

    logger.debug(
        "Conversion finished",
        extra={"metrics": result.metrics.to_dict(), "output": destination},
    )

    target = "stdout" if destination == STDOUT_MARKER else destination
    mode = " (multi-root mode)" if config.decoder.multi_root else ""
    print(f"Successfully converted {args.input} to {target}{mode}", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    # Set up logging verbosity
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging("WARNING")

    try:
        return cmd_convert(args)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
