"""CLI entry point for gl-importer."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from gl_importer.client import GitLabClient
from gl_importer.config import resolve_settings
from gl_importer.errors import ConfigError, ImporterError
from gl_importer.function import is_fatal, run_function
from gl_importer.logging_utils import setup_logging
from gl_importer.models import DEFAULT_TIMEOUT, GROUP_API_GROUP, PROJECT_API_GROUP, AddressingInfo, ResourceKind
from gl_importer.registry import lookup_implementation

LOOKUP_KINDS = {
    "project": (PROJECT_API_GROUP, ResourceKind.PROJECT),
    "group": (GROUP_API_GROUP, ResourceKind.GROUP),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gl-importer",
        description="Resolve external-names of GitLab projects and groups that already exist.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
gl-importer links composed GitLab projects and groups to existing remote resources
by writing their GitLab id into the crossplane.io/external-name annotation.

Environment:
    GITLAB_API_KEY - GitLab Personal Access Token (GITLAB_TOKEN is also accepted)
    GITLAB_URL     - GitLab instance URL (default: https://gitlab.com)

Examples:
    # Run one reconciliation pass over a function request
    gl-importer run --request request.json > response.json

    # Same, reading the request from stdin with JSON log lines on stderr
    cat request.json | gl-importer --json run

    # Look up the id of project 'demo' in group 100
    gl-importer lookup project --parent-id 100 --path demo
""",
    )
    parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output log lines as JSON (to stderr)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--gitlab-url", default=None, help="GitLab instance URL (default: from GITLAB_URL env or https://gitlab.com)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Seconds to wait for each GitLab API page (default: {DEFAULT_TIMEOUT})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    run = subparsers.add_parser("run", help="Process a function request and print the response")
    run.add_argument(
        "--request",
        default="-",
        help="Path to the request JSON, or - for stdin (default: -)",
    )

    lookup = subparsers.add_parser("lookup", help="Resolve the GitLab id of a project or group")
    lookup.add_argument("kind", choices=sorted(LOOKUP_KINDS), help="Kind of resource to look up")
    lookup.add_argument("--parent-id", type=int, required=True, help="ID of the parent group")
    lookup.add_argument("--path", required=True, help="Path of the project or group")

    return parser


def cmd_run(args: argparse.Namespace, logger: logging.Logger) -> int:
    try:
        if args.request == "-":
            request = json.load(sys.stdin)
        else:
            with open(args.request, encoding="utf-8") as fh:
                request = json.load(fh)
    except OSError as e:
        logger.error(f"Cannot read request: {e}")
        return 1
    except json.JSONDecodeError as e:
        logger.error(f"Cannot parse request: {e}")
        return 1
    if not isinstance(request, dict):
        logger.error("Cannot parse request: expected a JSON object")
        return 1

    response = run_function(request, base_url=args.gitlab_url, timeout=args.timeout)
    json.dump(response, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 1 if is_fatal(response) else 0


def cmd_lookup(args: argparse.Namespace, logger: logging.Logger) -> int:
    api_group, kind = LOOKUP_KINDS[args.kind]
    impl = lookup_implementation(api_group, kind.value)
    if impl is None:
        logger.error(f"Unsupported kind: {args.kind}")
        return 1

    try:
        settings = resolve_settings(args.gitlab_url, timeout=args.timeout)
        client = GitLabClient(settings.base_url, settings.token, timeout=settings.timeout)
        addressing = AddressingInfo(parent_id=args.parent_id, path=args.path)
        external_name = impl.importer.resolve(client, addressing)
        full_path = impl.importer.full_path(client, external_name)
    except ImporterError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    logger.info(f"Resolved: {kind.value} '{full_path}' (id={external_name})")
    print(external_name)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    logger = setup_logging(json_mode=args.json_output, verbose=args.verbose)

    try:
        if args.command == "run":
            return cmd_run(args, logger)
        return cmd_lookup(args, logger)
    except ConfigError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
