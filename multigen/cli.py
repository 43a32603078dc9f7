"""CLI entrypoints for multigen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .decomposer import FormatError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .render import TARGET_IDS


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_quiet_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Only report warnings and errors.",
    )


def _add_root_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help="Project root holding .multigen.yml (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="multigen",
        description="Transpile canonical exchange classes into Python and PHP sources.",
    )
    _add_verbose_option(parser)
    _add_quiet_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a debug log to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    transpile_parser = subparsers.add_parser(
        "transpile",
        help="Transpile every eligible source class and regenerate derived files.",
    )
    _add_verbose_option(transpile_parser, suppress_default=True)
    _add_quiet_option(transpile_parser, suppress_default=True)
    transpile_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    transpile_parser.add_argument(
        "--pattern",
        default=None,
        help="Source filename pattern (defaults to the configured '.js').",
    )

    render_parser = subparsers.add_parser(
        "render",
        help="Print one source class rendered for a single target.",
    )
    _add_verbose_option(render_parser, suppress_default=True)
    _add_quiet_option(render_parser, suppress_default=True)
    _add_root_option(render_parser)
    render_parser.add_argument("file", type=Path, help="Canonical class file to render.")
    render_parser.add_argument(
        "--target",
        choices=TARGET_IDS,
        default="python3",
        help="Target to render (defaults to python3).",
    )

    sync_parser = subparsers.add_parser(
        "sync-driver",
        help="Derive the synchronous test driver from the asynchronous one.",
    )
    _add_verbose_option(sync_parser, suppress_default=True)
    _add_quiet_option(sync_parser, suppress_default=True)
    _add_root_option(sync_parser)
    sync_parser.add_argument("source", type=Path, help="Asynchronous test driver.")
    sync_parser.add_argument("target", type=Path, help="Where to write the synchronous driver.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for multigen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=args.log_file,
    )

    orchestrator = Orchestrator()

    try:
        if args.command == "transpile":
            result = orchestrator.run(args.path, pattern=args.pattern)
            print(f"{result.transpiled} classes transpiled, {len(result.deleted)} stale files deleted")
        elif args.command == "render":
            orchestrator.load(args.root)
            sys.stdout.write(orchestrator.render_file(args.file, args.target))
        elif args.command == "sync-driver":
            orchestrator.load(args.root)
            written = orchestrator.derive_sync_driver(args.source, args.target)
            print(f"Synchronous driver written to {_relativize(written)}")
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except FormatError as exc:
        source = exc.source or "<input>"
        parser.exit(1, f"multigen: failed to transpile {source}: {exc.reason}\n")
    except (ConfigError, FileNotFoundError, ValueError) as exc:
        parser.exit(1, f"multigen {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
