# main.py
#
# Description:
# Batch entry point: finds and downloads a stock photo for every recipe in the
# site index, sharing one set of used URLs so no two recipes get the same
# picture. A failure on one recipe is logged and the batch moves on.

import argparse
import logging
import os
import time
from typing import Callable, List, Optional, Sequence

from dotenv import load_dotenv

import config
from exceptions import DownloadError
from image_finder import category_folder, find_and_download_image, recipe_slug
from image_providers import ImageSearchProvider
from recipe_index import (
    apply_image_to_entry, load_recipe_index, recipe_index_path,
    recipe_request_from_entry, save_recipe_index
)
from utils import setup_logging


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Find stock photos for every recipe in the site index.")
    parser.add_argument("--site-root", default=config.SITE_ROOT,
                        help="Root of the static site (default: $RICETTARIO_PATH or ../Ricettario).")
    parser.add_argument("--only-missing", action="store_true",
                        help="Skip recipes whose image file already exists.")
    parser.add_argument("--limit", type=int, default=None,
                        help="Process at most this many recipes.")
    return parser.parse_args(argv)


def log_provider_credentials():
    for env_name in (config.PEXELS_API_KEY_ENV, config.UNSPLASH_API_KEY_ENV, config.PIXABAY_API_KEY_ENV):
        if not os.environ.get(env_name):
            logging.info(f"{env_name} not set; that provider will be skipped.")


def run_batch(
    site_root: str,
    only_missing: bool = False,
    limit: Optional[int] = None,
    providers: Optional[List[ImageSearchProvider]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> dict:
    """
    Resolves images for the recipes in the site index and patches the index.

    Returns:
        A summary dict with 'total', 'found', 'missing', 'failed' and 'skipped' counts.
    """
    index_path = recipe_index_path(site_root)
    index = load_recipe_index(index_path)
    entries = index['recipes'][:limit] if limit is not None else index['recipes']

    summary = {'total': len(entries), 'found': 0, 'missing': 0, 'failed': 0, 'skipped': 0}
    used_urls = set()

    logging.info(f"📊 Found {len(entries)} recipes to update in {index_path}")

    for i, entry in enumerate(entries):
        try:
            recipe = recipe_request_from_entry(entry)
        except (ValueError, TypeError, AttributeError) as e:
            logging.error(f"❌ Invalid recipe entry #{i + 1}: {e}")
            summary['failed'] += 1
            continue

        logging.info(f"--- [{i + 1}/{len(entries)}] {recipe.title} ({recipe.category}) ---")

        if only_missing:
            image_path = os.path.join(site_root, config.IMAGES_RELATIVE_DIR,
                                      category_folder(recipe.category), f"{recipe_slug(recipe)}.jpg")
            if os.path.exists(image_path):
                logging.debug(f"Image already exists at {image_path}, skipping.")
                summary['skipped'] += 1
                continue

        try:
            descriptor = find_and_download_image(recipe, site_root, used_urls, providers=providers, sleep=sleep)
            if descriptor:
                apply_image_to_entry(entry, descriptor)
                save_recipe_index(index, index_path)
                logging.info(f"✅ {recipe.title} → {descriptor.home_relative_path}")
                summary['found'] += 1
            else:
                logging.warning(f"⚠️ No image found for {recipe.title}, skipped.")
                summary['missing'] += 1
        except DownloadError as e:
            logging.error(f"❌ {recipe.title}: {e}. Continuing without an image.")
            summary['failed'] += 1
        except Exception as e:
            logging.error(f"❌ Unexpected error for {recipe.title}: {e}")
            summary['failed'] += 1

        if i < len(entries) - 1:
            sleep(config.BATCH_DELAY_SECONDS)

    logging.info("--- Image batch summary ---")
    logging.info(f"✅ {summary['found']}/{summary['total']} images downloaded")
    if summary['missing'] or summary['failed']:
        logging.warning(f"⚠️ {summary['missing']} without image, {summary['failed']} failed")
    if summary['skipped']:
        logging.info(f"{summary['skipped']} skipped (image already present)")
    return summary


def main(argv: Optional[Sequence[str]] = None):
    load_dotenv()
    setup_logging()
    args = parse_args(argv)

    logging.info("🚀 Starting stock image batch...")
    log_provider_credentials()

    run_batch(args.site_root, only_missing=args.only_missing, limit=args.limit)
    logging.info("All recipes have been processed.")


if __name__ == "__main__":
    main()
