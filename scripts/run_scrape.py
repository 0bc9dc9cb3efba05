"""
Run one page scrape from the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from app.scraping.errors import ScrapePipelineError
from app.services.scraping_service import ScrapingService
from db.session import session_scope


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scrape one page and upsert its items.")
    parser.add_argument(
        "--identity",
        required=True,
        help="Identity to run as; must be listed in SCRAPE_ADMIN_IDENTITIES.",
    )
    parser.add_argument("--target", default=None, help="Configured target name.")
    parser.add_argument("--url", default=None, help="Page URL for an inline config.")
    parser.add_argument("--article", default=None, help="Selector for one item node.")
    parser.add_argument("--title", default=None, help="Selector for the item title.")
    parser.add_argument("--link", default=None, help="Selector for the item link.")
    parser.add_argument("--price", default=None, help="Optional selector for the item price.")
    return parser


def _inline_config(args: argparse.Namespace) -> dict[str, object] | None:
    if args.url is None:
        return None
    selectors = {
        "article": args.article,
        "title": args.title,
        "link": args.link or args.title,
    }
    if args.price:
        selectors["price"] = args.price
    return {"url": args.url, "selectors": selectors}


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    service = ScrapingService()
    principal = service.principal_for(args.identity)
    try:
        with session_scope() as db:
            result = service.scrape(
                db=db,
                principal=principal,
                config=_inline_config(args),
                target=args.target,
            )
    except ScrapePipelineError as exc:
        payload = {"success": False, "code": exc.code, "message": exc.message}
        print(json.dumps(payload, indent=2), file=sys.stderr)
        return 1
    except (ValueError, FileNotFoundError) as exc:
        print(json.dumps({"success": False, "code": "invalid-argument", "message": str(exc)}, indent=2), file=sys.stderr)
        return 2

    print(json.dumps({"success": result.success, "message": result.message, "count": result.count}, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
