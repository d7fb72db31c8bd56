"""
generate_sitemap.py

Offline sitemap export for the static frontend.

The backend already serves /sitemap.xml dynamically. Static hosts cannot
call it at request time, so this script writes a sitemap.xml file that
can be deployed with the frontend.

Two modes:
1) default                -> build from the local question registry
2) --from-url URL         -> download the live sitemap from a running backend

--from-url and --output override SITEMAP_SOURCE_URL and SITEMAP_OUTPUT_PATH.
"""

import argparse
import os
import sys
from dataclasses import dataclass
from pathlib import Path

import requests
from dotenv import load_dotenv

from intelliask.services.registry import REGISTRY_KEY, QuestionRegistry
from intelliask.services.sitemap import build_sitemap
from intelliask.services.storage import FileStorage

load_dotenv()


@dataclass
class Settings:
    """
    DATA_DIR: directory holding questions.json
    OUTPUT_PATH: where sitemap.xml is written
    BASE_URL: public site URL used in <loc>
    SOURCE_URL: optional live backend sitemap to copy instead
    """
    DATA_DIR: str
    OUTPUT_PATH: str
    BASE_URL: str
    SOURCE_URL: str | None


def load_settings() -> Settings:
    return Settings(
        DATA_DIR=os.getenv("DATA_DIR", "data"),
        OUTPUT_PATH=os.getenv("SITEMAP_OUTPUT_PATH", "public/sitemap.xml"),
        BASE_URL=os.getenv("PUBLIC_BASE_URL", "https://intelliask.netlify.app"),
        SOURCE_URL=os.getenv("SITEMAP_SOURCE_URL") or None,
    )


def sitemap_from_registry(settings: Settings) -> str:
    """
    Builds the sitemap from the registry snapshot on disk.
    Fails fast if no question has been registered yet.
    """
    registry_file = Path(settings.DATA_DIR) / REGISTRY_KEY
    if not registry_file.is_file():
        raise SystemExit(f"Registry file does not exist yet: {registry_file}")

    records = QuestionRegistry(FileStorage(settings.DATA_DIR)).all()
    print(f"Questions in registry: {len(records)}")
    return build_sitemap(records, settings.BASE_URL)


def sitemap_from_url(url: str) -> str:
    try:
        r = requests.get(url, timeout=30)
        r.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise SystemExit(f"Could not download sitemap from {url}: {e}") from e
    return r.text


def write_sitemap(xml: str, output_path: str) -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(xml, encoding="utf-8")
    return path


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Write sitemap.xml for the static frontend.")
    parser.add_argument("--from-url", dest="from_url", help="Copy the sitemap served by a running backend.")
    parser.add_argument("--output", help="Destination file for sitemap.xml.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    settings = load_settings()
    if args.from_url:
        settings.SOURCE_URL = args.from_url
    if args.output:
        settings.OUTPUT_PATH = args.output

    if settings.SOURCE_URL:
        xml = sitemap_from_url(settings.SOURCE_URL)
    else:
        xml = sitemap_from_registry(settings)

    path = write_sitemap(xml, settings.OUTPUT_PATH)
    print(f"Sitemap written to: {path}")


if __name__ == "__main__":
    sys.exit(main())
