# brandswap/cli/replace.py
"""
CLI commands for running and exercising the replacement engine.

Usage:
    python -m brandswap.cli.replace serve --port 3000
    python -m brandswap.cli.replace rules
    python -m brandswap.cli.replace scan blog_post "Everest" --entry blt01 --entry blt02
    python -m brandswap.cli.replace preview blog_post "Everest" "K2" --entry blt01 --smart
    python -m brandswap.cli.replace validate "Everest" "K2"
"""

import argparse
import asyncio
import json
import sys

from dotenv import load_dotenv

load_dotenv()


def _build_brandkit():
    from brandswap.config import get_settings
    from brandswap.dependencies import get_brandkit_service

    return get_brandkit_service(get_settings())


def cmd_serve(args):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("brandswap.main:app", host=args.host, port=args.port, reload=args.reload)


def cmd_rules(args):
    """Show the active policy ruleset and where it came from."""
    from brandswap.dependencies import close_services

    async def run():
        brandkit = _build_brandkit()
        try:
            ruleset = await brandkit.get_rules()
        finally:
            await close_services()

        source = "Brandkit API" if brandkit.remote_configured else brandkit.rules_path
        print(f"\n=== Brand Rules ({source}) ===\n")
        print("Approved terms:")
        for approved in ruleset.approved_terms:
            print(f"  {approved.term} -> {approved.replace_with}")
        print("\nBanned terms:")
        for banned in ruleset.banned_terms:
            print(f"  {banned}")
        print()

    asyncio.run(run())


def cmd_scan(args):
    """Scan entries for a term without changing anything."""
    from brandswap.dependencies import close_services
    from brandswap.records.factory import get_record_store
    from brandswap.services.preview_service import PreviewService

    async def run():
        service = PreviewService(record_store=get_record_store(), brandkit=_build_brandkit())
        try:
            matches = await service.scan(args.content_type, args.query, args.entry)
        finally:
            await close_services()

        print(f"\nMatches for '{args.query}': {len(matches)}\n")
        for match in matches:
            print(f"[{match.entry_uid}] {match.title} :: {match.field}")
            print(f"  {match.before}")

    asyncio.run(run())


def cmd_preview(args):
    """Preview a replacement (nothing is written)."""
    from brandswap.config import get_settings
    from brandswap.dependencies import close_services, get_refinement_adapter
    from brandswap.records.factory import get_record_store
    from brandswap.services.preview_service import PreviewService

    async def run():
        refiner = get_refinement_adapter(get_settings()) if args.smart else None
        service = PreviewService(record_store=get_record_store(), brandkit=_build_brandkit(), refiner=refiner)
        try:
            report = await service.preview(
                args.content_type, args.query, args.replace_with, args.entry, smart=args.smart
            )
        finally:
            await close_services()

        if args.json:
            print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
            return

        print(f"\n{report.mode.upper()} preview: '{report.query}' -> '{report.replace_with}'")
        print(f"Total changes: {report.total_changes}\n")
        for entry in report.preview:
            print(f"[{entry.entry_uid}] {entry.title}")
            for change in entry.changes:
                flag = "" if change.brandkit_approved else "  [BANNED TERM]"
                print(f"  {change.field}{flag}")
                print(f"    - {change.before}")
                print(f"    + {change.after}")
            print()

    asyncio.run(run())


def cmd_validate(args):
    """Validate one term/replacement pair against the Brandkit API."""
    from brandswap.dependencies import close_services

    async def run():
        brandkit = _build_brandkit()
        try:
            result = await brandkit.validate(args.query, args.replace_with)
        finally:
            await close_services()

        print(json.dumps(result, indent=2, ensure_ascii=False))
        if not result.get("approved"):
            sys.exit(1)

    asyncio.run(run())


def main():
    parser = argparse.ArgumentParser(
        description="Brandswap CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the API locally
  python -m brandswap.cli.replace serve --reload

  # Show the active rules
  python -m brandswap.cli.replace rules

  # Smart preview for two entries, as JSON
  python -m brandswap.cli.replace preview blog_post Everest K2 --entry blt01 --entry blt02 --smart --json
        """,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=3000, help="Port (default: 3000)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve_parser.set_defaults(func=cmd_serve)

    # rules command
    rules_parser = subparsers.add_parser("rules", help="Show approved and banned terms")
    rules_parser.set_defaults(func=cmd_rules)

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Find entries containing a term")
    scan_parser.add_argument("content_type", help="Content type UID")
    scan_parser.add_argument("query", help="Term to search for")
    scan_parser.add_argument("--entry", action="append", required=True, help="Entry UID (repeatable)")
    scan_parser.set_defaults(func=cmd_scan)

    # preview command
    preview_parser = subparsers.add_parser("preview", help="Preview a replacement")
    preview_parser.add_argument("content_type", help="Content type UID")
    preview_parser.add_argument("query", help="Term to replace")
    preview_parser.add_argument("replace_with", help="Replacement term")
    preview_parser.add_argument("--entry", action="append", required=True, help="Entry UID (repeatable)")
    preview_parser.add_argument("--smart", action="store_true", help="Run contextual refinement")
    preview_parser.add_argument("--json", action="store_true", help="Print the raw report as JSON")
    preview_parser.set_defaults(func=cmd_preview)

    # validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a term/replacement pair")
    validate_parser.add_argument("query", help="Original term")
    validate_parser.add_argument("replace_with", help="Replacement term")
    validate_parser.set_defaults(func=cmd_validate)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
