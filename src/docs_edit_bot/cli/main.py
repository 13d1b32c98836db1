"""CLI entry point for the docs edit bot."""
import argparse
import json
import logging
import sys
import traceback
from pathlib import Path

from dotenv import load_dotenv

from docs_edit_bot.agents.exceptions import BotError
from docs_edit_bot.api.handlers import (
    HandlerResponse,
    Services,
    handle_assistant,
    handle_change_proposal,
)
from docs_edit_bot.config import Settings

# Exit codes
EXIT_SUCCESS = 0
EXIT_INVALID_INPUT = 1
EXIT_CONFIG_ERROR = 2
EXIT_UPSTREAM_ERROR = 3
EXIT_UNEXPECTED = 5
EXIT_KEYBOARD_INTERRUPT = 130

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="docs-edit-bot",
        description="Propose and commit documentation edits with an LLM",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--dry-run", action="store_true", help="Print config and exit without running"
    )
    parser.add_argument(
        "--output-json", action="store_true", help="Output results as JSON"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default=DEFAULT_HOST, help=f"Bind host (default: {DEFAULT_HOST})")
    serve.add_argument(
        "--port", type=int, default=DEFAULT_PORT, help=f"Bind port (default: {DEFAULT_PORT})"
    )

    ask = subparsers.add_parser("ask", help="Ask the developer assistant")
    ask.add_argument("prompt", type=str, help="Question or file request")

    propose = subparsers.add_parser("propose", help="Preview or apply documentation edits")
    propose.add_argument("prompt", type=str, nargs="?", default="", help="Requested change")
    propose.add_argument(
        "--files-json",
        type=str,
        default="",
        help="JSON file holding a list of {path, content, commitMessage} entries (skips generation)",
    )
    propose.add_argument("--title", type=str, default="", help="Pull request title for --files-json")
    propose.add_argument("--body", type=str, default="", help="Pull request body for --files-json")
    propose.add_argument(
        "--approve",
        action="store_true",
        help="Commit the edits to a new branch and open a pull request",
    )
    return parser


def load_files_json(raw_path: str) -> list:
    """Read a list of file edits from disk.

    Raises:
        SystemExit: If the file is missing or does not hold a JSON list.
    """
    path = Path(raw_path).expanduser()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Error: cannot read '{raw_path}': {exc}", file=sys.stderr)
        raise SystemExit(EXIT_INVALID_INPUT)
    if not isinstance(payload, list):
        print(f"Error: '{raw_path}' must contain a JSON list of files.", file=sys.stderr)
        raise SystemExit(EXIT_INVALID_INPUT)
    return payload


def build_request_body(args: argparse.Namespace) -> dict:
    """Translate ``propose`` arguments into a change-proposal request body."""
    body: dict = {"prompt": args.prompt, "approve": args.approve}
    if args.files_json:
        body["files"] = load_files_json(args.files_json)
    if args.title:
        body["prTitle"] = args.title
    if args.body:
        body["prBody"] = args.body
    return body


def exit_code_for(status: int) -> int:
    """Map a handler status code to a process exit code."""
    if status < 400:
        return EXIT_SUCCESS
    if status < 500:
        return EXIT_INVALID_INPUT
    if status == 502:
        return EXIT_UPSTREAM_ERROR
    return EXIT_CONFIG_ERROR


def print_result_human(command: str, result: HandlerResponse) -> None:
    """Print a handler result in human-readable format."""
    body = result.body
    if result.status >= 400:
        print(f"Error ({result.status}): {body.get('error')}", file=sys.stderr)
        for key in ("step", "path", "branch", "details"):
            if body.get(key):
                print(f"  {key}: {body[key]}", file=sys.stderr)
        return

    if command == "ask":
        print(body["reply"])
        return

    if body.get("preview"):
        plan = body["aiResult"]
        print(f"\n{'='*60}")
        print(f"Proposed: {plan.get('prTitle') or '(untitled)'}")
        print(f"{'='*60}")
        if plan.get("prBody"):
            print(f"\n{plan['prBody']}")
        print(f"\nFiles ({len(plan['files'])}):")
        for item in plan["files"]:
            print(f"  - {item['path']}: {item.get('commitMessage') or ''}")
        print("\nRe-run with --approve to commit these edits.")
        return

    pr = body.get("pr") or {}
    print(f"Branch: {body.get('branch')}")
    print(f"Files written: {len(body.get('files', []))}")
    print(f"Pull request: {pr.get('html_url') or pr.get('url')}")


def _handle_error(label: str, exc: BaseException, verbose: bool, exit_code: int) -> int:
    """Print error message to stderr and return the exit code."""
    print(f"{label}: {exc}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return exit_code


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def serve(services: Services, host: str, port: int) -> int:
    # Deferred so ask/propose do not pay for the server stack
    import uvicorn

    from docs_edit_bot.api.app import create_app

    uvicorn.run(create_app(services), host=host, port=port)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code integer.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    load_dotenv()

    try:
        settings = Settings.from_env()
    except BotError as exc:
        return _handle_error("Configuration error", exc, args.verbose, EXIT_CONFIG_ERROR)

    if args.dry_run:
        config = {"command": args.command, **settings.safe_dict()}
        if args.output_json:
            print(json.dumps(config, indent=2))
        else:
            print("\nConfiguration:")
            print(f"{'='*40}")
            for key, value in config.items():
                print(f"  {key}: {value}")
            print(f"{'='*40}")
        return EXIT_SUCCESS

    services = Services(settings=settings)

    try:
        if args.command == "serve":
            return serve(services, args.host, args.port)

        if args.command == "ask":
            result = handle_assistant("POST", {"prompt": args.prompt}, services)
        else:
            try:
                body = build_request_body(args)
            except SystemExit as exc:
                return exc.code
            result = handle_change_proposal("POST", body, services)

        if args.output_json:
            print(json.dumps({"status": result.status, **result.body}, indent=2, default=str))
        else:
            print_result_human(args.command, result)
        return exit_code_for(result.status)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_KEYBOARD_INTERRUPT

    except Exception as exc:
        return _handle_error("Unexpected error", exc, args.verbose, EXIT_UNEXPECTED)


if __name__ == "__main__":
    sys.exit(main())
