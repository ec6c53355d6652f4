import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from mrmm.batch import BatchExecutor, BatchOutcome
from mrmm.commands import Command, build_command
from mrmm.config import TOKEN_ENV_VAR, load_settings
from mrmm.errors import ConfigurationError
from mrmm.github.client import GitHubClient
from mrmm.github.milestones import RESOLUTION_POLICIES, MilestoneClient
from mrmm.repos import parse_targets, read_repository_list
from mrmm.report.render_md import write_report
from mrmm.trace.store_jsonl import JsonlTraceStore

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


class _Parser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit with the fatal code."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FATAL, f"{self.prog}: error: {message}\n")


def terminate(code: int, message: str):
    print(message, file=sys.stderr if code == EXIT_FATAL else sys.stdout)
    sys.exit(code)


def _due_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}")


def _print_outcome(command: Command, outcome: BatchOutcome):
    if outcome.ok:
        number = f" (#{outcome.milestone.number})" if outcome.milestone and outcome.milestone.number else ""
        print(f"✓ {command.done} milestone {command.title}{number} in repository {outcome.target}")
    else:
        print(f"✗ Failed to {command.name} milestone {command.title} in repository {outcome.target}: {outcome.reason}")


def run_batch(args, command: Command) -> int:
    settings = load_settings(
        token=args.github_token,
        api_url=args.api_url,
        max_workers=args.workers,
    )

    print(f"Will load the list of repositories from {args.repo_list_file}")
    targets = parse_targets(read_repository_list(args.repo_list_file))
    print(f"Have {len(targets)} repositories to work with")

    client = MilestoneClient(
        GitHubClient.from_settings(settings),
        per_page=settings.per_page,
        resolve=RESOLUTION_POLICIES[args.resolve],
    )

    trace_store = JsonlTraceStore(Path(args.trace_file)) if args.trace_file else None
    executor = BatchExecutor(
        max_workers=settings.max_workers,
        trace_store=trace_store,
        on_outcome=lambda outcome: _print_outcome(command, outcome),
    )

    print(f"{command.verb} milestone {command.title} in {len(targets)} repositories")
    try:
        report = executor.run(targets, command, client)
    finally:
        if trace_store is not None:
            trace_store.close()

    print(f"Succeeded: {len(report.succeeded)}, failed: {len(report.failed)}")
    if args.report_file:
        report_path = write_report(report, Path(args.report_file))
        print(f"  Report: {report_path}")
    if args.trace_file:
        print(f"  Trace: {args.trace_file}")

    if args.strict and not report.all_succeeded:
        return EXIT_PARTIAL_FAILURE
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="mrmm",
        description="mrmm (Multi-repo Milestone Manager): manage milestones of a group of repositories at once",
    )
    parser.add_argument(
        "-t",
        "--github-token",
        help=f"GitHub token to use (default: ${TOKEN_ENV_VAR})",
    )
    parser.add_argument(
        "-f",
        "--repo-list-file",
        required=True,
        help="A file with the list of repositories (org/repo), one by line",
    )
    parser.add_argument("--api-url", help="GitHub API root (default: $GITHUB_API_URL or https://api.github.com)")
    parser.add_argument("--workers", type=int, default=1, help="Repositories processed concurrently (default: 1)")
    parser.add_argument(
        "--resolve",
        choices=sorted(RESOLUTION_POLICIES),
        default="first",
        help="Which milestone wins when several share a title: first open-then-closed match, or newest (default: first)",
    )
    parser.add_argument("--trace-file", help="Append a JSONL trace of the batch to this file")
    parser.add_argument("--report-file", help="Write a Markdown report of the batch to this file")
    parser.add_argument("--strict", action="store_true", help=f"Exit with {EXIT_PARTIAL_FAILURE} if any repository failed")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    create_parser = subparsers.add_parser("create", help="Creates a milestone")
    create_parser.add_argument("--title", required=True, help="milestone title")
    create_parser.add_argument("--description", help="milestone description")
    create_parser.add_argument("--due-on", type=_due_date, help="due date (YYYY-MM-DD)")

    close_parser = subparsers.add_parser("close", help="Closes a milestone")
    close_parser.add_argument("--title", required=True, help="milestone title")

    delete_parser = subparsers.add_parser("delete", help="Deletes a milestone")
    delete_parser.add_argument("--title", required=True, help="milestone title")

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        terminate(EXIT_FATAL, "No command specified.")

    if not args.title.strip():
        terminate(EXIT_FATAL, "✗ Milestone title must not be empty")

    command = build_command(
        args.command,
        args.title,
        description=getattr(args, "description", None),
        due_on=getattr(args, "due_on", None),
    )

    try:
        code = run_batch(args, command)
    except ConfigurationError as e:
        terminate(EXIT_FATAL, f"✗ {e}")

    terminate(code, "Done.")


if __name__ == "__main__":
    main()
