"""CLI entrypoints for govlens commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .logging import configure_logging
from .tools import GovernanceTools

_COMMANDS = {
    "health": ("governance_get_health", "Compute the health score, grade and per-check results."),
    "governance": ("governance_get_state", "Show the governance descriptor state."),
    "vcs": ("governance_get_vcs_status", "Show branch, history and working-tree status."),
    "metrics": ("governance_get_code_metrics", "Show source, test, line and dependency metrics."),
    "tests": ("governance_run_tests", "Detect and run the project's test suite."),
    "checkpoints": ("governance_list_checkpoints", "List saved checkpoints, newest first."),
    "security": ("governance_security_scan", "Run the heuristic security scan."),
    "dashboard": ("governance_open_dashboard", "Render the HTML dashboard to a temporary file."),
}


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


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="govlens",
        description="Snapshot a repository's governance health.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, (_, help_text) in _COMMANDS.items():
        sub = subparsers.add_parser(command, help=help_text)
        _add_verbose_option(sub, suppress_default=True)
        _add_path_argument(sub)

    serve_parser = subparsers.add_parser("serve", help="Serve the tools over HTTP.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for govlens commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    tool_name, _ = _COMMANDS[args.command]
    response = GovernanceTools().call(tool_name, args.path)
    print(json.dumps(response.result, indent=2))
    if response.is_error:
        parser.exit(
            1,
            f"govlens {args.command} failed: {response.result.get('message')}\n"
            "Run with --verbose for more details.\n",
        )


if __name__ == "__main__":
    main(sys.argv[1:])
