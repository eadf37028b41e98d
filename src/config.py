# config.py
#
# Description:
# This file contains all the configuration settings for the image finder.
# By keeping them in one place, it's easy to adjust paths, thresholds,
# and provider settings without changing the core logic of the application.

import os

# --- File Paths ---
# Root of the static site. Images land in <SITE_ROOT>/public/images/ricette/
# and the recipe index lives at <SITE_ROOT>/public/recipes.json.
SITE_ROOT = os.environ.get("RICETTARIO_PATH", "../Ricettario")
RECIPE_INDEX_RELATIVE_PATH = os.path.join("public", "recipes.json")
IMAGES_RELATIVE_DIR = os.path.join("public", "images", "ricette")

# --- Image Provider Settings ---
# Each keyed provider reads its credential from the environment at search time.
# A provider without a credential is skipped silently.
# How to set environment variables:
# macOS/Linux: export PEXELS_API_KEY="your_api_key_here"
# Windows: set PEXELS_API_KEY="your_api_key_here"
PEXELS_API_KEY_ENV = "PEXELS_API_KEY"
UNSPLASH_API_KEY_ENV = "UNSPLASH_ACCESS_KEY"
PIXABAY_API_KEY_ENV = "PIXABAY_API_KEY"

PEXELS_SEARCH_URL = "https://api.pexels.com/v1/search"
UNSPLASH_SEARCH_URL = "https://api.unsplash.com/search/photos"
PIXABAY_SEARCH_URL = "https://pixabay.com/api/"
WIKIMEDIA_API_URL = "https://commons.wikimedia.org/w/api.php"

USER_AGENT = "IlRicettarioBot/1.0"
REQUEST_TIMEOUT_SECONDS = 15

# Results requested per query.
SEARCH_LIMIT = 15
WIKIMEDIA_SEARCH_LIMIT = 10

# Minimum size for images coming from the keyless fallback.
MIN_IMAGE_WIDTH = 600
MIN_IMAGE_HEIGHT = 400

# --- Scoring Settings ---
# A candidate at or above STRONG_MATCH_SCORE ends the query loop for a provider;
# a best candidate at or above ACCEPTABLE_SCORE ends the provider loop.
STRONG_MATCH_SCORE = 10
ACCEPTABLE_SCORE = 5
DUPLICATE_PENALTY = 1000
# Candidates scoring at or below this are duplicates and never selected.
DUPLICATE_FLOOR = -500

# --- Download Settings ---
DOWNLOAD_MAX_ATTEMPTS = 3
DOWNLOAD_RATE_LIMIT_BACKOFF_SECONDS = 3
DOWNLOAD_RETRY_DELAY_SECONDS = 1

# --- Processing Settings ---
QUERY_DELAY_SECONDS = 0.3
BATCH_DELAY_SECONDS = 2

# --- Category Folders ---
# Maps the recipe category to its image sub-folder. Unknown categories
# fall back to their lowercase name.
CATEGORY_FOLDERS = {
    "Pane": "pane",
    "Pizza": "pizza",
    "Pasta": "pasta",
    "Lievitati": "lievitati",
    "Focaccia": "pane",
}
DEFAULT_CATEGORY = "Pane"

# --- Query Building ---
QUERY_STOPWORDS = {
    "di", "del", "della", "delle", "dei", "al", "alla", "alle",
    "con", "in", "per", "tipo",
}

# Italian -> English lookup for better stock photo queries.
TRANSLATIONS = {
    # Categories
    "pane": "bread",
    "pasta": "pasta",
    "pizza": "pizza",
    "focaccia": "focaccia",
    "lievitati": "pastry dough",
    # Pasta shapes
    "rigatoni": "rigatoni pasta",
    "spaghetti": "spaghetti",
    "maccheroni": "macaroni pasta",
    "fusilli": "fusilli pasta",
    "linguine": "linguine pasta",
    "tagliatelle": "tagliatelle egg pasta",
    "pappardelle": "pappardelle pasta",
    "orecchiette": "orecchiette pasta",
    "pici": "pici tuscan pasta",
    "malloreddus": "sardinian gnocchi malloreddus",
    "tajarin": "tajarin piedmont egg pasta",
    "pizzoccheri": "pizzoccheri buckwheat pasta",
    "gnocco": "gnocchi potato",
    # Bread
    "ciabatta": "ciabatta italian bread",
    "pagnotta": "round bread loaf",
    "filone": "italian bread loaf baguette",
    "casalingo": "homemade rustic bread",
    "integrale": "whole wheat bread loaf",
    "semola": "semolina bread puglia",
    "latte": "milk bread soft rolls",
    "noci": "walnut bread artisan",
    "olive": "olive bread mediterranean",
    # Pizza
    "napoletana": "neapolitan pizza wood oven",
    "margherita": "margherita pizza basil mozzarella",
    "teglia": "roman pizza al taglio",
}

QUERY_PAIR_SUFFIX = "homemade"
QUERY_NAME_SUFFIX = "italian homemade"
QUERY_CATEGORY_SUFFIX = "italian traditional"
