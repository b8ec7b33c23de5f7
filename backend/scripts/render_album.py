"""Compute an album layout and render it to PDF and/or HTML.

Usage:
    python -m scripts.render_album --media-dir media/trip --output out/trip.pdf
    python -m scripts.render_album --assets assets.json --config layout.json --html out/trip.html

Assets come either from a JSON file (a list of asset objects as produced by
`Asset.to_dict`) or from scanning a directory of images. They are laid out
in capture-time order.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from domain.models import Asset
from services.layout_config import layout_config_from_dict
from services.layout_engine import calculate_page_layout
from services.manifest import sort_by_capture_time
from services.metadata_extractor import scan_media_dir
from services.render_pdf import DEFAULT_PREVIEW_SCALE, render_pages_to_html, render_pages_to_pdf

LOG = logging.getLogger("render_album")


def load_assets(assets_path: Optional[Path], media_dir: Optional[Path]) -> List[Asset]:
    if assets_path:
        data = json.loads(assets_path.read_text(encoding="utf-8"))
        return [Asset.from_dict(item) for item in data]
    if media_dir:
        return scan_media_dir(media_dir)
    return []


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a paginated photo book layout.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--assets", type=Path, help="JSON file with a list of assets")
    source.add_argument("--media-dir", type=Path, help="Directory of images to lay out")
    parser.add_argument("--config", type=Path, help="JSON file with layout settings")
    parser.add_argument("--media-root", type=Path, help="Root for asset file paths (defaults to --media-dir)")
    parser.add_argument("--output", type=Path, help="PDF output path")
    parser.add_argument("--html", type=Path, help="HTML preview output path")
    parser.add_argument("--preview-scale", type=float, default=DEFAULT_PREVIEW_SCALE)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not args.output and not args.html:
        LOG.error("Nothing to do: pass --output and/or --html")
        return 2

    raw_config = json.loads(args.config.read_text(encoding="utf-8")) if args.config else {}
    config = layout_config_from_dict(raw_config)
    assets = sort_by_capture_time(load_assets(args.assets, args.media_dir))
    pages = calculate_page_layout(assets, config)
    LOG.info("Laid out %s assets on %s pages", len(assets), len(pages))
    for page in pages:
        LOG.debug("page %s: %s photos, %s rows", page.page_number, len(page.photos), len(page.rows))

    media_root = args.media_root or args.media_dir
    if args.output:
        render_pages_to_pdf(pages, config, str(args.output), media_root=str(media_root) if media_root else None)
        LOG.info("PDF written to %s", args.output)
    if args.html:
        args.html.parent.mkdir(parents=True, exist_ok=True)
        base_url = media_root.resolve().as_uri() if media_root else "/media"
        args.html.write_text(render_pages_to_html(pages, config, args.preview_scale, base_url), encoding="utf-8")
        LOG.info("HTML preview written to %s", args.html)
    return 0


if __name__ == "__main__":
    sys.exit(main())
