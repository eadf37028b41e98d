# recipe_index.py
#
# Description:
# Reads and patches the site-wide recipe index (public/recipes.json) that the
# homepage renders its carousels from. Only the image fields of an entry are
# touched here.

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict

import config
from models import ImageDescriptor, RecipeImageRequest


def empty_index() -> Dict[str, Any]:
    return {"generatedAt": "", "totalRecipes": 0, "categories": [], "recipes": []}


def recipe_index_path(site_root: str) -> str:
    return os.path.join(site_root, config.RECIPE_INDEX_RELATIVE_PATH)


def load_recipe_index(path: str) -> Dict[str, Any]:
    """Loads the recipe index, or an empty one if it is missing or corrupt."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        logging.warning(f"Recipe index not found at {path}, starting from an empty index.")
        return empty_index()
    except json.JSONDecodeError as e:
        logging.warning(f"⚠️ Recipe index {path} is corrupt ({e}), starting from an empty index.")
        return empty_index()

    if not isinstance(data, dict) or not isinstance(data.get('recipes'), list):
        logging.warning(f"⚠️ Recipe index {path} has no 'recipes' list, starting from an empty index.")
        return empty_index()
    return data


def save_recipe_index(data: Dict[str, Any], path: str):
    """Saves the recipe index, refreshing its timestamp and counters."""
    data['generatedAt'] = datetime.now(timezone.utc).isoformat()
    data['totalRecipes'] = len(data.get('recipes', []))
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logging.debug(f"Saved recipe index with {data['totalRecipes']} recipes to {path}")


def recipe_request_from_entry(entry: Dict[str, Any]) -> RecipeImageRequest:
    """
    Builds an image request from a recipe index entry.

    Raises:
        ValueError: If the entry is not an object, or has neither title nor slug.
    """
    if not isinstance(entry, dict):
        raise ValueError(f"expected a recipe object, got {type(entry).__name__}")

    slug = entry.get('slug') or ''
    title = entry.get('title') or slug.replace('-', ' ')
    if not title.strip():
        raise ValueError("recipe entry has neither a title nor a slug")

    return RecipeImageRequest(
        title=title,
        category=entry.get('category') or '',
        slug=slug,
        image_keywords=entry.get('imageKeywords') or [],
    )


def apply_image_to_entry(entry: Dict[str, Any], descriptor: ImageDescriptor) -> Dict[str, Any]:
    """Writes a downloaded image into a recipe index entry, in place."""
    entry['image'] = descriptor.home_relative_path
    entry['imageAttribution'] = descriptor.attribution
    entry['imageCredit'] = {
        'author': descriptor.author,
        'license': descriptor.license,
        'provider': descriptor.provider.value,
        'sourceUrl': descriptor.url,
        'width': descriptor.width,
        'height': descriptor.height,
    }
    return entry
