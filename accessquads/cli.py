"""Command-line interface: convert a database snapshot into N-Quads."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TextIO

from . import __version__
from .generator import QuadGenerator, QuadMode
from .nquads import compute_dataset_stats, format_quad
from .reader import DatabaseError, JsonDatabase
from .terms import Quad

logger = logging.getLogger(__name__)


class LineWriter:
    """Quad sink writing one N-Quads line per quad to a text stream."""

    def __init__(self, out: TextIO, collect: bool = False):
        self.out = out
        self.written: list[Quad] | None = [] if collect else None
        self.ended = False

    def write(self, quad: Quad) -> bool:
        """Write one quad line; the buffer never reports full."""
        self.out.write(format_quad(quad) + "\n")
        if self.written is not None:
            self.written.append(quad)
        return True

    def end(self) -> None:
        """Flush the output after the last quad."""
        self.out.flush()
        self.ended = True


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="accessquads",
        description="Convert a tabular database snapshot into RDF N-Quads.",
    )
    parser.add_argument("input", help="Database snapshot (JSON) path, or '-' for stdin.")
    parser.add_argument(
        "-o",
        "--output",
        default="-",
        help="Output N-Quads file path, or '-' for stdout (default).",
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in QuadMode],
        default=QuadMode.FACADE_X.value,
        help="Model used to generate quads (default: facade-x).",
    )
    parser.add_argument(
        "--base",
        default=None,
        help="Base IRI for the Facade-X graphs (default: input file URI + '#').",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print dataset statistics to stderr.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def guess_base_iri(path: str, explicit_base: str | None) -> str | None:
    """Derive the base IRI from CLI arguments and input path."""
    if explicit_base is not None:
        return explicit_base
    if path == "-":
        return None
    return Path(path).resolve().as_uri() + "#"


def load_database(path: str) -> JsonDatabase:
    """Load the JSON snapshot at ``path``, or from stdin for ``-``."""
    if path == "-":
        return JsonDatabase.from_text(sys.stdin.read(), source="<stdin>")
    return JsonDatabase.load(path)


def emit_stats(stats: dict[str, int]) -> None:
    """Print dataset statistics to stderr."""
    print("stats:", file=sys.stderr)
    for key, value in stats.items():
        print(f"{key}: {value}", file=sys.stderr)


def run(
    generator: QuadGenerator, out: TextIO, stats: bool = False
) -> dict[str, int] | None:
    """Stream the generated quads to ``out`` as N-Quads lines."""
    stream = generator.stream()
    writer = stream.pipe(LineWriter(out, collect=stats))
    logger.debug("wrote %d quads", stream.count)
    if stats:
        return compute_dataset_stats(writer.written)
    return None


def main(argv: list[str] | None = None) -> int:
    """Run the ``accessquads`` command-line interface."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        generator = QuadGenerator(
            load_database(args.input),
            base_iri=guess_base_iri(args.input, args.base),
            quad_mode=args.mode,
        )
        if args.output == "-":
            stats = run(generator, sys.stdout, stats=args.stats)
        else:
            with open(args.output, "w", encoding="utf-8") as out:
                stats = run(generator, out, stats=args.stats)
        if stats is not None:
            emit_stats(stats)
        return 0
    except (DatabaseError, ValueError, OSError) as exc:
        parser.exit(status=1, message=f"Error: {exc}\n")
