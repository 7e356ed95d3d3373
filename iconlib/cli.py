# iconlib/cli.py
"""
Batch runner for the icon library.

Commands:
- generate-metadata : walk the asset tree and write the catalog
- generate-aliases  : synthesize aliases from the catalog and merge them
                      into the alias table
- refresh           : metadata -> aliases -> metadata, so fresh aliases
                      land in the catalog keywords
- search            : run a catalog query in-process and print one page
- serve             : start the HTTP API with uvicorn
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import uvicorn
from loguru import logger

from .aliases import generate_alias_file
from .api import create_app
from .catalog_build import generate_metadata
from .catalog_query import query_catalog
from .config import (
    ALIAS_PATH,
    METADATA_PATH,
    PNG_DIR,
    SERVER_HOST,
    SERVER_PORT,
    SVG_DIR,
    CatalogQuery,
)
from .snapshot import CatalogSnapshot, CatalogStore
from .storage import AliasTableError, CatalogFormatError


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def _add_path_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--svg-dir", type=Path, default=SVG_DIR, help="SVG asset root")
    ap.add_argument("--png-dir", type=Path, default=PNG_DIR, help="PNG asset root")
    ap.add_argument("--metadata", type=Path, default=METADATA_PATH, help="catalog JSON file")
    ap.add_argument("--aliases", type=Path, default=ALIAS_PATH, help="alias table JSON file")


def _run_metadata(args: argparse.Namespace) -> bool:
    try:
        generate_metadata(
            svg_dir=args.svg_dir,
            png_dir=args.png_dir,
            metadata_path=args.metadata,
            alias_path=args.aliases,
        )
    except OSError as e:
        logger.error("Error generating metadata: {}", e)
        return False
    return True


def _run_aliases(args: argparse.Namespace) -> None:
    generate_alias_file(metadata_path=args.metadata, alias_path=args.aliases)


def cmd_generate_metadata(args: argparse.Namespace) -> int:
    return 0 if _run_metadata(args) else 1


def cmd_generate_aliases(args: argparse.Namespace) -> int:
    try:
        _run_aliases(args)
    except FileNotFoundError as e:
        logger.error("{}", e)
        return 1
    except (CatalogFormatError, AliasTableError) as e:
        logger.error("Error generating aliases: {}", e)
        return 1
    return 0


def cmd_refresh(args: argparse.Namespace) -> int:
    logger.info("Generating icon metadata...")
    if not _run_metadata(args):
        return 1
    logger.info("Generating icon aliases...")
    status = cmd_generate_aliases(args)
    if status != 0:
        return status
    logger.info("Folding aliases back into the catalog...")
    if not _run_metadata(args):
        return 1
    logger.info("All data refreshed successfully!")
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    snapshot = CatalogSnapshot.from_files(args.metadata, args.aliases)
    params = CatalogQuery(
        q=args.query,
        category=args.category,
        subcategory=args.subcategory,
        page=args.page,
        limit=args.limit,
        sort_by=args.sort_by,
        sort_order=args.sort_order,
    )
    response = query_catalog(snapshot, params)
    p = response.pagination
    print(f"{p.total} icons, page {p.current_page}/{p.total_pages}")
    for icon in response.icons:
        sub = f"/{icon.subcategory}" if icon.subcategory else ""
        print(f"  {icon.category}{sub}/{icon.name}  ({icon.display_name})")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    app = create_app(CatalogStore(args.metadata, args.aliases))
    logger.info("Serving catalog {} with aliases {}", args.metadata, args.aliases)
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="iconlib", description="Icon library catalog tools")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("generate-metadata", help="build the icon catalog")
    _add_path_args(p)
    p.set_defaults(func=cmd_generate_metadata)

    p = sub.add_parser("generate-aliases", help="build / merge the alias table")
    _add_path_args(p)
    p.set_defaults(func=cmd_generate_aliases)

    p = sub.add_parser("refresh", help="regenerate catalog and aliases")
    _add_path_args(p)
    p.set_defaults(func=cmd_refresh)

    p = sub.add_parser("search", help="query the catalog")
    _add_path_args(p)
    p.add_argument("query", nargs="?", default=None, help="free-text query (optional)")
    p.add_argument("--category", default=None)
    p.add_argument("--subcategory", default=None)
    p.add_argument("--page", default=None)
    p.add_argument("--limit", default=None)
    p.add_argument("--sort-by", dest="sort_by", default=None, choices=["name", "category", "date"])
    p.add_argument("--sort-order", dest="sort_order", default=None, choices=["asc", "desc"])
    p.set_defaults(func=cmd_search)

    p = sub.add_parser("serve", help="run the HTTP API")
    p.add_argument("--host", default=SERVER_HOST)
    p.add_argument("--port", type=int, default=SERVER_PORT)
    p.add_argument("--metadata", type=Path, default=METADATA_PATH, help="catalog JSON file")
    p.add_argument("--aliases", type=Path, default=ALIAS_PATH, help="alias table JSON file")
    p.set_defaults(func=cmd_serve)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
