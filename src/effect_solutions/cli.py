"""effect-solutions command-line interface.

Commands mirror the MCP surface: ``list`` and ``show`` render guides,
``search``, ``open-issue`` and ``help`` go through the same tool dispatcher as
``tools/call``, and ``serve`` starts the MCP server.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, TextIO

from effect_solutions import __version__
from effect_solutions.config import configure_logging, get_settings
from effect_solutions.context import AppContext, build_context
from effect_solutions.errors import EffectSolutionsError
from effect_solutions.installer import default_target, install_skill
from effect_solutions.issues import IssueCategory
from effect_solutions.server import add_transport_arguments, run_server
from effect_solutions.tools.dispatcher import ToolDispatcher
from effect_solutions.utils import DEFAULT_SEARCH_LIMIT

EXIT_OK = 0
EXIT_ERROR = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="effect-solutions",
        description="Effect Solutions - Effect best-practice guides from the terminal",
    )
    parser.add_argument("--version", "-v", action="version", version=f"effect-solutions {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all guides")

    show = sub.add_parser("show", help="Print one or more guides in the given order")
    show.add_argument("slugs", nargs="+", help="Guide slugs (see 'list')")

    search = sub.add_parser("search", help="Search guides by keywords")
    search.add_argument("query", nargs="+", help="Search keywords")
    search.add_argument("--limit", type=int, default=DEFAULT_SEARCH_LIMIT, help="Maximum number of results")
    search.add_argument("--json", action="store_true", help="Print the raw tool payload")

    issue = sub.add_parser("open-issue", help="Draft a GitHub issue about the guides")
    issue.add_argument("--category", required=True, choices=[c.value for c in IssueCategory])
    issue.add_argument("--title", required=True)
    issue.add_argument("--description", required=True)
    issue.add_argument("--json", action="store_true", help="Print the raw tool payload")

    sub.add_parser("help", help="Show the MCP server guide")

    links = sub.add_parser("check-links", help="Validate internal links between guides")
    links.add_argument("--json", action="store_true", help="Print broken links as JSON")

    install = sub.add_parser("install", help="Install the guides as an agent skill")
    install.add_argument("--global", "-g", dest="global_install", action="store_true",
                         help="Install to ~/.claude/skills/ instead of ./.claude/skills/")
    install.add_argument("--target", type=Path, default=None, help="Install into this directory instead")

    serve = sub.add_parser("serve", help="Run the MCP server")
    add_transport_arguments(serve)

    return parser


def main(argv: list[str] | None = None, stdout: TextIO | None = None, stderr: TextIO | None = None) -> int:
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    if args.command == "serve":
        return run_server(settings, args.transport, args.host, args.port)

    try:
        context = build_context(settings)
        return _run_command(args, context, stdout, stderr)
    except EffectSolutionsError as exc:
        print(f"error: {exc.message}", file=stderr)
        return EXIT_ERROR


def _run_command(args: argparse.Namespace, context: AppContext, stdout: TextIO, stderr: TextIO) -> int:
    dispatcher = ToolDispatcher(context)

    if args.command == "list":
        print(context.renderer.render_list(), file=stdout)
        return EXIT_OK

    if args.command == "show":
        print(context.renderer.render_docs(args.slugs), file=stdout)
        return EXIT_OK

    if args.command == "search":
        payload = dispatcher.invoke(
            "search_effect_solutions", {"query": " ".join(args.query), "limit": args.limit}
        ).structured
        if args.json:
            _print_json(payload, stdout)
        elif not payload["results"]:
            print("No matching guides.", file=stdout)
        else:
            for result in payload["results"]:
                print(f"{result['slug']} — {result['title']}", file=stdout)
        return EXIT_OK

    if args.command == "open-issue":
        payload = dispatcher.invoke(
            "open_issue",
            {"category": args.category, "title": args.title, "description": args.description},
        ).structured
        if args.json:
            _print_json(payload, stdout)
        else:
            print(payload["message"], file=stdout if payload["opened"] else stderr)
        return EXIT_OK

    if args.command == "help":
        print(dispatcher.invoke("get_help").structured["guide"], file=stdout)
        return EXIT_OK

    if args.command == "check-links":
        checker = context.link_checker()
        issues = checker.check()
        if args.json:
            _print_json({"links": len(checker.internal_links()), "issues": [i.to_dict() for i in issues]}, stdout)
            return EXIT_ERROR if issues else EXIT_OK
        if not issues:
            print(f"All {len(checker.internal_links())} internal links are valid.", file=stdout)
            return EXIT_OK
        print(f"Found {len(issues)} broken link(s):", file=stderr)
        for issue in issues:
            link = issue.link
            print(f"  {link.slug}:{link.line}  [{link.text}]({link.href})", file=stderr)
            print(f"    {issue.error}", file=stderr)
        return EXIT_ERROR

    if args.command == "install":
        target = args.target or default_target(args.global_install)
        result = install_skill(context.store, target)
        print(f"Installed {len(result.files)} files to {result.target}", file=stdout)
        return EXIT_OK

    raise AssertionError(f"unhandled command: {args.command}")


def _print_json(payload: dict[str, Any], stdout: TextIO) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False), file=stdout)


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
