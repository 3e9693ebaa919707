"""Command-line interface for codemorph."""

from __future__ import annotations

import argparse
import dataclasses
import io
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path

from codemorph.config import diff_config_from_config, load_config, timings_from_config
from codemorph.diff import DiffConfig
from codemorph.errors import ConfigError
from codemorph.highlights import HighlightRange, parse_range
from codemorph.timing import Timings


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    old_file: Path
    new_file: Path
    output_file: Path | None
    language: str | None
    highlights: list[HighlightRange]
    manual_only: bool
    animate: bool
    at: float | None
    output_format: str
    line_numbers: bool
    timings: Timings
    diff_config: DiffConfig
    watch: bool
    debug: bool
    verbose: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="codemorph",
        description="Diff two versions of a code snippet and show the animation timeline",
    )
    p.add_argument("old", help="Previous version of the code")
    p.add_argument("new", help="Current version of the code")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-l",
        "--language",
        metavar="LANG",
        help="Language tag (html, css, javascript, ...; default: detect)",
    )
    p.add_argument(
        "--highlight",
        action="append",
        default=[],
        metavar="START:END[:KIND]",
        help="Manual highlight range over NEW (repeatable)",
    )
    p.add_argument(
        "--manual-only",
        action="store_true",
        help="Show only manually highlighted tokens",
    )
    p.add_argument(
        "--static",
        action="store_true",
        help="Do not animate; show the current code as unchanged",
    )
    p.add_argument(
        "--at",
        type=float,
        default=None,
        metavar="MS",
        help="Render the frame at this many ms into the animation (html format)",
    )
    p.add_argument(
        "--format",
        choices=("text", "html"),
        default="text",
        help="Output format (default: text)",
    )
    p.add_argument(
        "--no-line-numbers", action="store_true", help="Omit line numbers in html output"
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover codemorph.toml beside NEW)",
    )
    for name in ("positioning", "pause", "adding", "stagger"):
        p.add_argument(
            f"--{name}",
            type=float,
            default=None,
            metavar="MS",
            help=f"Override the {name} duration in milliseconds",
        )
    p.add_argument("--watch", action="store_true", help="Watch NEW for changes and re-report")
    p.add_argument("--debug", action="store_true", help="Dump tokens and diff to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug messages to stderr")
    return p


def parse_highlight_arg(s: str) -> HighlightRange:
    """Parse a START:END[:KIND] string into a HighlightRange."""
    try:
        return parse_range(s)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    new_file = Path(args.new)
    search_dir = new_file.parent
    if not search_dir.parts:
        search_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, search_dir)
    source_path = config_path or search_dir / "codemorph.toml"

    timings = timings_from_config(config, source_path)
    overrides = {}
    for name in ("positioning", "pause", "adding", "stagger"):
        value = getattr(args, name)
        if value is not None:
            if value < 0:
                raise ConfigError(f"--{name} must not be negative")
            overrides[name] = value
    if overrides:
        timings = dataclasses.replace(timings, **overrides)

    return CliOptions(
        old_file=Path(args.old),
        new_file=new_file,
        output_file=Path(args.output) if args.output else None,
        language=args.language,
        highlights=[parse_highlight_arg(raw) for raw in args.highlight],
        manual_only=args.manual_only,
        animate=not args.static,
        at=args.at,
        output_format=args.format,
        line_numbers=not args.no_line_numbers,
        timings=timings,
        diff_config=diff_config_from_config(config, source_path),
        watch=args.watch,
        debug=args.debug,
        verbose=args.verbose,
    )


def report(options: CliOptions, previous: str, current: str) -> str:
    """Build the transition between two texts and format it per the options."""
    from codemorph.debug import dump_diff, dump_tokens, write_report
    from codemorph.engine import TransitionRequest, build_transition
    from codemorph.lexer import tokenize
    from codemorph.render import render_html

    request = TransitionRequest(
        current_code=current,
        previous_code=previous,
        language=options.language,
        manual_highlights=tuple(options.highlights),
        use_manual_highlights_only=options.manual_only,
        is_animating=options.animate,
    )
    transition = build_transition(request, options.timings, options.diff_config)

    if options.debug:
        sys.stderr.write("-- previous tokens\n")
        dump_tokens(tokenize(previous, transition.language))
        sys.stderr.write("-- current tokens\n")
        dump_tokens(tokenize(current, transition.language))
        sys.stderr.write("-- diff\n")
        dump_diff(transition.tokens)

    if options.output_format == "html":
        return render_html(transition, options.at, line_numbers=options.line_numbers)

    buf = io.StringIO()
    write_report(transition, file=buf)
    return buf.getvalue()


def _write(options: CliOptions, text: str) -> None:
    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def watch_loop(options: CliOptions) -> None:
    """Poll NEW for changes; report each change against the last seen version."""
    previous = options.old_file.read_text(encoding="utf-8")
    last_mtime = 0.0
    print(f"Watching {options.new_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.new_file.stat().st_mtime
                current = options.new_file.read_text(encoding="utf-8")
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                _write(options, report(options, previous, current))
                previous = current
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    try:
        if options.watch:
            watch_loop(options)
            return 0
        previous = options.old_file.read_text(encoding="utf-8")
        current = options.new_file.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    _write(options, report(options, previous, current))
    return 0
