"""CLI entry point — ``rightsdossier legal|status|nexus|search|rights``."""

from __future__ import annotations

# Phase 1: Singleton logging — before any transitive litellm imports
from rightsdossier.logging_config import setup_logging

setup_logging()

import argparse  # noqa: E402
import asyncio  # noqa: E402
import json  # noqa: E402
import sys  # noqa: E402
from typing import Any  # noqa: E402

from rightsdossier import __version__  # noqa: E402
from rightsdossier.catalog import (  # noqa: E402
    RIGHTS,
    filter_rights,
    get_right,
    get_right_by_name,
    rights_by_category,
)
from rightsdossier.config import Settings  # noqa: E402
from rightsdossier.constants import RightCategory, Scope  # noqa: E402
from rightsdossier.logging_config import (  # noqa: E402
    cleanup_third_party_handlers,
)

# Phase 2: Clear litellm's duplicate handlers after all imports
cleanup_third_party_handlers()


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"rightsdossier {__version__}")
        return

    if args.command in ("legal", "status"):
        _run_analysis(args)
    elif args.command == "nexus":
        _run_nexus(args)
    elif args.command == "search":
        _run_search(args)
    elif args.command == "rights":
        _run_rights(args)
    else:
        parser.print_help()


def _add_scope_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--scope",
        choices=[s.value for s in Scope],
        default=Scope.INTERNATIONAL.value,
        help="Jurisdictional scope (default: International)",
    )
    parser.add_argument(
        "--sub-scope",
        default="",
        help="Region or country for Regional/National scope",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="rightsdossier",
        description=(
            "Grounded citations for human rights law, "
            "current status and scholarship."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    legal = sub.add_parser(
        "legal",
        help="Legal instruments protecting a right",
    )
    legal.add_argument("right", help="Right name or catalog id")
    _add_scope_args(legal)

    status = sub.add_parser(
        "status",
        help="Current NGO and UN reporting on a right",
    )
    status.add_argument("right", help="Right name or catalog id")
    _add_scope_args(status)

    nexus = sub.add_parser(
        "nexus",
        help="Scholarship on how two rights interconnect",
    )
    nexus.add_argument("from_right", help="First right name or id")
    nexus.add_argument("to_right", help="Second right name or id")
    _add_scope_args(nexus)

    search = sub.add_parser(
        "search",
        help="Find rights related to a term",
    )
    search.add_argument("term", help="Free-text search term")

    rights = sub.add_parser(
        "rights",
        help="List the rights catalog",
    )
    rights.add_argument(
        "--category",
        choices=[c.value for c in RightCategory],
        default=None,
        help="Only list one category",
    )

    return parser


def _right_name(value: str) -> str:
    """Catalog ids and names resolve to the catalog name.

    Anything else passes through, so free-text rights still work.
    """
    right = get_right(value) or get_right_by_name(value)
    return right.name if right is not None else value


def _print_json(payload: Any) -> None:
    json.dump(payload, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def _run_analysis(args: argparse.Namespace) -> None:
    """Execute the legal or status command."""
    from rightsdossier.dialogue.orchestrator import DialogueOrchestrator

    orchestrator = DialogueOrchestrator(Settings())
    right = _right_name(args.right)
    if args.command == "legal":
        op = orchestrator.get_scope_analysis
    else:
        op = orchestrator.get_status_analysis
    result = asyncio.run(op(right, Scope(args.scope), args.sub_scope))
    _print_json(result.to_dict())


def _run_nexus(args: argparse.Namespace) -> None:
    """Execute the nexus command."""
    from rightsdossier.dialogue.orchestrator import DialogueOrchestrator

    orchestrator = DialogueOrchestrator(Settings())
    result = asyncio.run(
        orchestrator.get_nexus_analysis(
            _right_name(args.from_right),
            _right_name(args.to_right),
            Scope(args.scope),
            args.sub_scope,
        )
    )
    _print_json(result.to_dict())


def _run_search(args: argparse.Namespace) -> None:
    """Execute the search command."""
    from rightsdossier.search.semantic import (
        SemanticConceptMatcher,
        normalize_term,
    )

    matcher = SemanticConceptMatcher(settings=Settings())
    term = normalize_term(args.term)
    instant = matcher.instant_matches(term)
    resolved = asyncio.run(matcher.resolve(term))
    rights = filter_rights(RIGHTS, term, semantic_ids=resolved)
    _print_json(
        {
            "term": term,
            "instant": [r.id for r in RIGHTS if r.id in instant],
            "semantic": [r.id for r in RIGHTS if r.id in resolved],
            "rights": [r.to_dict() for r in rights],
        }
    )


def _run_rights(args: argparse.Namespace) -> None:
    """Execute the rights command."""
    rights = (
        rights_by_category(args.category) if args.category else list(RIGHTS)
    )
    _print_json([r.to_dict() for r in rights])


if __name__ == "__main__":
    main()
