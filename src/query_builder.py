# query_builder.py
#
# Description:
# Builds the ordered list of stock photo search queries for a recipe.
# Italian recipe names are translated word by word through a static lookup
# table, since the stock photo providers index mostly English text.

import logging
import re
from typing import List, Optional, Sequence

import config


def significant_words(words: Sequence[str]) -> List[str]:
    """Drops stopwords and words of two letters or fewer."""
    return [w for w in words if w not in config.QUERY_STOPWORDS and len(w) > 2]


def translate(word: str) -> str:
    """Returns the English form of a word, or the word itself if unknown."""
    return config.TRANSLATIONS.get(word, word)


def build_search_queries(recipe_name: str, category: str = "",
                         ai_keywords: Optional[Sequence[str]] = None) -> List[str]:
    """
    Builds deduplicated search queries for a recipe, most precise first.

    Args:
        recipe_name: The recipe title, e.g. "Rigatoni alla Norma".
        category: The recipe category, e.g. "Pasta". May be empty.
        ai_keywords: English keywords suggested by the LLM, used verbatim.

    Returns:
        The queries in the order they should be tried.
    """
    ai_keywords = list(ai_keywords or [])
    clean_name = re.sub(r"[-_]", " ", recipe_name)
    clean_name = re.sub(r"\s+", " ", clean_name).strip()
    name_words = clean_name.lower().split(" ") if clean_name else []
    words = significant_words(name_words)

    queries = []

    # 1. AI keywords are the most specific
    queries.extend(ai_keywords[:2])

    # 2. Direct translation of the main word
    main_word = words[0] if words else (name_words[0] if name_words else "")
    if main_word in config.TRANSLATIONS:
        queries.append(config.TRANSLATIONS[main_word])

    # 3. First two significant words, translated
    if len(words) >= 2:
        translated = " ".join(translate(w) for w in words[:2])
        queries.append(f"{translated} {config.QUERY_PAIR_SUFFIX}")

    # 4. Simplified full name
    simple_name = " ".join(words[:3]) or main_word
    if simple_name:
        queries.append(f"{simple_name} {config.QUERY_NAME_SUFFIX}")

    # 5. Category as a last resort
    if category:
        en_category = translate(category.lower())
        queries.append(f"{en_category} {config.QUERY_CATEGORY_SUFFIX}")

    unique_queries = list(dict.fromkeys(q for q in queries if q))
    logging.debug(f"Search queries for '{recipe_name}': {unique_queries}")
    return unique_queries
