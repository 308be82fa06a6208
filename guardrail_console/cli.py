"""
Command line for the guardrail console.

Usage:
    guardrail-console dashboard
    guardrail-console scan "Send the file to j.smith(at)company(dot)com"
    guardrail-console chat "hello"
    guardrail-console wake --then dashboard
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from . import render
from .config import load_config
from .console import GuardrailConsole
from .errors import InputValidationError, UnconfiguredError, describe_failure
from .logs import LogConfig, initialize as initialize_logging
from .models import WakePhase

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_UNCONFIGURED = 2


def _exit_code(error: Optional[Exception]) -> int:
    if error is None:
        return EXIT_OK
    if isinstance(error, UnconfiguredError):
        return EXIT_UNCONFIGURED
    return EXIT_FAILED


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


def print_dashboard(console: GuardrailConsole) -> None:
    snapshot = console.dashboard.snapshot
    loading = console.dashboard.loading

    for label, value in render.kpi_cards(snapshot, loading=loading):
        print(f"{label:16} {value}")
    print()

    incidents = snapshot.incidents if snapshot else []
    if incidents:
        print(render.format_table(render.incident_rows(incidents), render.INCIDENT_COLUMNS))
    else:
        print(render.empty_incidents_text(loading))


async def cmd_dashboard(console: GuardrailConsole, args) -> int:
    outcome = await console.dashboard.load()
    if args.json:
        _print_json(outcome.value.model_dump(mode="json") if outcome.value else None)
    else:
        print_dashboard(console)
    if not outcome.ok:
        print(f"\n{describe_failure(outcome.error)}", file=sys.stderr)
    return _exit_code(outcome.error)


async def cmd_scan(console: GuardrailConsole, args) -> int:
    outcome = await console.scanner.scan(args.prompt)
    if isinstance(outcome.error, InputValidationError):
        print(f"Nothing to scan: {outcome.error}", file=sys.stderr)
        return EXIT_FAILED

    result = outcome.value
    if args.json:
        _print_json(result.model_dump(mode="json"))
    else:
        for title, body in render.scan_panels(result):
            print(f"== {title}")
            print(body)
            print()
        print(f"Redactions: {render.format_redactions(result.redactions)}")
    return _exit_code(outcome.error)


async def cmd_chat(console: GuardrailConsole, args) -> int:
    outcome = await console.chat.send(args.message)
    if isinstance(outcome.error, InputValidationError):
        print(f"Nothing to send: {outcome.error}", file=sys.stderr)
        return EXIT_FAILED

    result = outcome.value
    if args.json:
        _print_json(result.model_dump(mode="json"))
    else:
        print(result.answer)
        print(render.chat_footer(result))
    return _exit_code(outcome.error)


async def cmd_wake(console: GuardrailConsole, args) -> int:
    if not console.configured:
        print(console.warning, file=sys.stderr)
        return EXIT_UNCONFIGURED

    state = await console.waker.start()
    if args.json:
        _print_json(state.model_dump(mode="json"))
    else:
        print(f"Wake {state.phase.value} after {state.attempts} probe(s)")
        if args.then == "dashboard":
            print()
            print_dashboard(console)
    return EXIT_OK if state.phase is WakePhase.SUCCEEDED else EXIT_FAILED


COMMANDS = {
    "dashboard": cmd_dashboard,
    "scan": cmd_scan,
    "chat": cmd_chat,
    "wake": cmd_wake,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="guardrail-console",
        description="Operator console for a guardrail/moderation backend",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--api-url", help="Backend base URL (overrides GUARDRAIL_API_URL)")
    parser.add_argument("--config", help="YAML config file (console: and logging: sections)")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("dashboard", help="Show KPIs and recent incidents")

    scan = sub.add_parser("scan", help="Scan a prompt with the guardrails")
    scan.add_argument("prompt")

    chat = sub.add_parser("chat", help="Send a quick chat message")
    chat.add_argument("message")

    wake = sub.add_parser("wake", help="Wake a cold backend")
    wake.add_argument(
        "--then",
        choices=["dashboard"],
        help="Print the dashboard refreshed after the wake",
    )
    return parser


async def run(args) -> int:
    config = load_config(config_path=args.config, api_url=args.api_url)
    async with GuardrailConsole(config) as console:
        return await COMMANDS[args.command](console, args)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.config:
        log_config = LogConfig.from_yaml(args.config)
    else:
        # Keep stdout readable: only warnings reach the terminal by default.
        log_config = LogConfig()
        log_config.console.level = "WARNING"
    log_config.apply_env()
    if args.log_level:
        log_config.global_level = args.log_level
        log_config.console.level = args.log_level
    initialize_logging(log_config)

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return EXIT_FAILED
