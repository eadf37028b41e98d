# image_finder.py
#
# Description:
# Multi-provider stock photo search for recipes. Providers are tried in
# priority order (Pexels, Unsplash, Pixabay, Wikimedia), each with the queries
# from the query builder, stopping early as soon as a good enough image turns
# up. A caller-owned set of already used URLs keeps a batch run from reusing
# the same photo for two recipes.

import logging
import os
import time
from typing import Callable, List, MutableSet, Optional, Sequence

import config
from exceptions import DownloadError
from image_downloader import download_image
from image_providers import ImageSearchProvider, default_providers
from image_scoring import apply_duplicate_penalty, is_duplicate_score, score_image
from models import ImageCandidate, ImageDescriptor, RecipeImageRequest
from query_builder import build_search_queries


def find_recipe_image(
    recipe_name: str,
    category: str = "",
    ai_keywords: Optional[Sequence[str]] = None,
    used_urls: Optional[MutableSet[str]] = None,
    providers: Optional[List[ImageSearchProvider]] = None,
    strong_match_score: int = config.STRONG_MATCH_SCORE,
    acceptable_score: int = config.ACCEPTABLE_SCORE,
    sleep: Callable[[float], None] = time.sleep,
) -> Optional[ImageCandidate]:
    """
    Searches all providers for the best image for a recipe.

    Args:
        recipe_name: The recipe title.
        category: The recipe category, may be empty.
        ai_keywords: English keywords suggested by the LLM.
        used_urls: URLs already used in this batch. The winner's URL is added.
        providers: Providers in priority order; defaults to all four.
        strong_match_score: Score that ends the query loop for a provider.
        acceptable_score: Score that ends the provider loop.
        sleep: Delay function, replaceable in tests.

    Returns:
        The winning candidate, or None if no acceptable image was found.
    """
    ai_keywords = list(ai_keywords or [])
    if used_urls is None:
        used_urls = set()
    if providers is None:
        providers = default_providers()

    logging.info(f"📸 Searching stock images for '{recipe_name}' ({category or 'no category'})")

    queries = build_search_queries(recipe_name, category, ai_keywords)
    keywords = [recipe_name.lower()] + [k.lower() for k in ai_keywords]

    best_image: Optional[ImageCandidate] = None

    for provider in providers:
        if not provider.is_configured:
            logging.debug(f"Skipping {provider.name.value}: no credential configured.")
            continue
        logging.info(f"🔎 {provider.name.value}")

        for query in queries:
            results = provider.search(query)

            if not results:
                logging.debug(f"   → '{query}' ... ❌ 0 results")
                sleep(config.QUERY_DELAY_SECONDS)
                continue

            for image in results:
                image.score = apply_duplicate_penalty(score_image(image, keywords), image.url, used_urls)

            top = max(results, key=lambda img: img.score)
            logging.debug(f"   → '{query}' ... ✅ {len(results)} results (top score {top.score})")

            if not is_duplicate_score(top.score) and (best_image is None or top.score > best_image.score):
                best_image = top

            if best_image and best_image.score >= strong_match_score:
                break

            sleep(config.QUERY_DELAY_SECONDS)

        if best_image and best_image.score >= acceptable_score:
            logging.info(f"✨ Found with {provider.name.value}!")
            break

    if best_image is None or best_image.score <= 0:
        logging.warning(f"⚠️ No acceptable image found for '{recipe_name}' on any provider.")
        return None

    used_urls.add(best_image.url)
    logging.info(f"🏆 Best: '{best_image.title}' (score {best_image.score})")
    logging.info(f"   📐 {best_image.width}x{best_image.height} | {best_image.provider.value} | "
                 f"{best_image.author} | {best_image.license}")
    logging.debug(f"   🔗 {best_image.url}")
    return best_image


def build_attribution(image: Optional[ImageCandidate]) -> str:
    """Builds the photo credit shown under the recipe image."""
    if not image:
        return ""
    author = image.author or image.provider.value
    return f"📷 Foto: {author} - {image.license} via {image.provider.value}"


def category_folder(category: str) -> str:
    """Maps a recipe category to its image sub-folder."""
    category = category or config.DEFAULT_CATEGORY
    return config.CATEGORY_FOLDERS.get(category, category.lower())


def recipe_slug(recipe: RecipeImageRequest) -> str:
    return recipe.slug or "-".join(recipe.title.lower().split())


def find_and_download_image(
    recipe: RecipeImageRequest,
    site_root: str,
    used_urls: Optional[MutableSet[str]] = None,
    providers: Optional[List[ImageSearchProvider]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Optional[ImageDescriptor]:
    """
    Finds the best image for a recipe and downloads it into the site tree.

    The file always gets a .jpg extension so existing templates keep working.

    Returns:
        The descriptor of the saved image, or None if no image was found.

    Raises:
        DownloadError: If an image was found but could not be downloaded.
        ValueError: If the recipe has no usable slug for the file name.
    """
    slug = recipe_slug(recipe)
    if not slug:
        raise ValueError(f"cannot name an image file for recipe {recipe.title!r}: empty slug")

    image = find_recipe_image(
        recipe.title,
        recipe.category,
        recipe.image_keywords,
        used_urls=used_urls,
        providers=providers,
        sleep=sleep,
    )
    if not image:
        return None

    folder = category_folder(recipe.category)
    filename = f"{slug}.jpg"
    local_path = os.path.abspath(os.path.join(site_root, config.IMAGES_RELATIVE_DIR, folder, filename))

    try:
        download_image(image.url, local_path, sleep=sleep)
    except DownloadError as e:
        logging.error(f"❌ Download failed for '{recipe.title}': {e}")
        raise

    home_relative_path = f"images/ricette/{folder}/{filename}"
    return ImageDescriptor(
        local_path=local_path,
        relative_path=f"../../{home_relative_path}",
        home_relative_path=home_relative_path,
        url=image.url,
        thumb_url=image.thumb_url,
        attribution=build_attribution(image),
        license=image.license,
        author=image.author,
        provider=image.provider,
        width=image.width,
        height=image.height,
    )
