"""Command-line interface: check the meta-commands in an LDraw model file."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from lpubmeta.errors import Diagnostic
from lpubmeta.meta import Meta
from lpubmeta.tokens import Rc, Where

logger = logging.getLogger(__name__)

# Traversal boundaries that end the lifetime of LOCAL values
_STEP_ENDS = (Rc.STEP, Rc.ROT_STEP)
_FILE_STARTS = ("FILE", "NOFILE")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None
    output_file: Path | None
    report_errors: bool
    range_errors_fail: bool
    pop_on_step: bool
    trace: bool
    doc: bool
    debug: bool
    verbose: bool


@dataclass(slots=True)
class CheckResult:
    """Outcome of running a model file through the interpreter."""

    meta: Meta
    diagnostics: list[Diagnostic] = field(default_factory=list)
    trace: list[str] = field(default_factory=list)
    failures: int = 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="lpubmeta",
        description="Check LPub meta-commands in an LDraw model file",
    )
    p.add_argument("input", nargs="?", help="Input model file (.ldr, .mpd)")
    p.add_argument("-o", "--output", help="Output file for --trace/--doc (default: stdout)")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover lpubmeta.toml)",
    )
    p.add_argument(
        "--trace",
        action="store_true",
        default=None,
        help="Print the action code of every recognized directive",
    )
    p.add_argument(
        "--no-report",
        dest="report_errors",
        action="store_false",
        default=None,
        help="Do not print diagnostics for rejected directives",
    )
    p.add_argument(
        "--pop",
        dest="pop_on_step",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Discard LOCAL values at each step and file boundary (default: on)",
    )
    p.add_argument("--doc", action="store_true", help="Print the directive reference")
    p.add_argument("--debug", action="store_true", help="Dump final values to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "lpubmeta.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def _config_bool(config: dict[str, Any], section: str, key: str, default: bool) -> bool:
    table = config.get(section)
    if isinstance(table, dict):
        value = table.get(key)
        if isinstance(value, bool):
            return value
    return default


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    if args.input is None and not args.doc:
        raise argparse.ArgumentTypeError("an input file is required unless --doc is given")

    input_file = Path(args.input) if args.input else None
    input_dir = input_file.parent if input_file is not None else Path(".")
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    if config_path is not None and not config_path.is_file():
        raise argparse.ArgumentTypeError(f"config file not found: {config_path}")
    try:
        config = load_config(config_path, input_dir)
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from exc

    report_errors = _config_bool(config, "parse", "report_errors", True)
    if args.report_errors is not None:
        report_errors = args.report_errors

    pop_on_step = _config_bool(config, "parse", "pop_on_step", True)
    if args.pop_on_step is not None:
        pop_on_step = args.pop_on_step

    trace = _config_bool(config, "output", "trace", False)
    if args.trace is not None:
        trace = args.trace

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        report_errors=report_errors,
        range_errors_fail=_config_bool(config, "parse", "range_errors_fail", True),
        pop_on_step=pop_on_step,
        trace=trace,
        doc=args.doc,
        debug=args.debug,
        verbose=args.verbose,
    )


def _starts_file(line: str) -> bool:
    parts = line.split(maxsplit=2)
    return len(parts) >= 2 and parts[1] in _FILE_STARTS


def scan(
    lines: Iterable[str],
    source: str,
    meta: Meta,
    *,
    report_errors: bool = True,
    pop_on_step: bool = True,
) -> Iterator[tuple[Where, str, Rc]]:
    """Feed each type-0 line of a model file to meta, yielding the results."""
    for number, line in enumerate(lines, start=1):
        parts = line.split(maxsplit=1)
        if not parts or parts[0] != "0":
            continue
        if pop_on_step and _starts_file(line):
            meta.pop()
        where = Where(source, number)
        rc = meta.parse(line, where, report_errors)
        yield where, line, rc
        if pop_on_step and rc in _STEP_ENDS:
            meta.pop()


def check_file(options: CliOptions) -> CheckResult:
    """Read a model file and run every meta-command through one Meta."""
    from lpubmeta.debug import dump_tree

    assert options.input_file is not None
    diagnostics: list[Diagnostic] = []
    result = CheckResult(Meta(reporter=diagnostics.append), diagnostics)

    source = options.input_file.read_text(encoding="utf-8", errors="replace")
    for where, line, rc in scan(
        source.splitlines(),
        str(options.input_file),
        result.meta,
        report_errors=options.report_errors,
        pop_on_step=options.pop_on_step,
    ):
        if rc == Rc.FAILURE or (rc == Rc.RANGE_ERROR and options.range_errors_fail):
            result.failures += 1
        if rc != Rc.OK or result.meta.preamble_match(line) is not None:
            result.trace.append(f"{where.line}: {rc.name:<20} {line.strip()}")

    logger.debug("%s: %d failing directive(s)", options.input_file, result.failures)
    if options.debug:
        dump_tree(result.meta)
    return result


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    output: list[str] = []
    if options.doc:
        output.extend(Meta().doc())

    code = 0
    if options.input_file is not None:
        try:
            result = check_file(options)
        except OSError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        for diagnostic in result.diagnostics:
            print(diagnostic.format(), file=sys.stderr)
        if options.trace:
            output.extend(result.trace)
        if result.failures:
            code = 1

    if output:
        text = "\n".join(output) + "\n"
        if options.output_file:
            options.output_file.write_text(text, encoding="utf-8")
        else:
            sys.stdout.write(text)

    return code
