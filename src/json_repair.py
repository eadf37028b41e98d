# json_repair.py
#
# Description:
# Tolerant JSON parsing for LLM output. Models often wrap JSON in markdown
# fences, add comments or leave trailing commas. Each cleanup below is a pure
# string -> string function; parse_llm_json applies them cumulatively and
# reports which one worked.
#
# This is the library entry point for the steps that ask an LLM for recipe
# data (rewriting, image keywords). The image batch itself only reads the
# site's own recipes.json, which is strict JSON and goes through json.load.

import json
import re
from typing import Any, Callable, List, NamedTuple, Optional, Tuple

from exceptions import LLMJsonError

# A complete double-quoted JSON string, escapes included. Every cleanup
# matches strings first and puts them back untouched.
_STRING = r'"(?:\\.|[^"\\])*"'
_COMMENT = re.compile(_STRING + r"|//[^\n]*|/\*[\s\S]*?\*/")
_TRAILING_COMMA = re.compile(_STRING + r"|,\s*([\]}])")


class ParseResult(NamedTuple):
    """The outcome of a tolerant parse: either a value or an error."""
    value: Any = None
    error: Optional[str] = None
    strategy: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def strip_code_fences(text: str) -> str:
    """Removes ```json ... ``` markdown fences."""
    text = re.sub(r"^```(?:json)?\s*", "", text, flags=re.MULTILINE)
    text = re.sub(r"^```\s*$", "", text, flags=re.MULTILINE)
    return text.strip()


def strip_js_comments(text: str) -> str:
    """Removes /* block */ and // line comments outside of string values."""
    def keep_strings(match):
        token = match.group(0)
        return token if token.startswith('"') else ""

    return _COMMENT.sub(keep_strings, text).strip()


def strip_trailing_commas(text: str) -> str:
    """Turns [1, 2,] into [1, 2] and {"a": 1,} into {"a": 1}."""
    def drop_comma(match):
        return match.group(1) if match.group(1) else match.group(0)

    return _TRAILING_COMMA.sub(drop_comma, text)


def extract_json_object(text: str) -> str:
    """Returns the outermost {...} span of the text, or an empty string."""
    match = re.search(r"\{[\s\S]*\}", text)
    return strip_trailing_commas(match.group(0)) if match else ""


def extract_json_array(text: str) -> str:
    """Returns the outermost [...] span of the text, or an empty string."""
    match = re.search(r"\[[\s\S]*\]", text)
    return strip_trailing_commas(match.group(0)) if match else ""


# Cleanups applied one after the other, each on top of the previous ones.
CUMULATIVE_STRATEGIES: List[Tuple[str, Callable[[str], str]]] = [
    ("strip_code_fences", strip_code_fences),
    ("strip_js_comments", strip_js_comments),
    ("strip_trailing_commas", strip_trailing_commas),
]

# Last resorts, each applied to the fully cleaned text.
EXTRACTION_STRATEGIES: List[Tuple[str, Callable[[str], str]]] = [
    ("extract_json_object", extract_json_object),
    ("extract_json_array", extract_json_array),
]


def _try_loads(text: str) -> Tuple[bool, Any]:
    if not text:
        return False, None
    try:
        return True, json.loads(text)
    except json.JSONDecodeError:
        return False, None


def parse_llm_json(text: str) -> ParseResult:
    """
    Parses JSON from an LLM response, trying progressively looser strategies.

    Args:
        text: The raw model output.

    Returns:
        A ParseResult with the parsed value and the strategy that succeeded,
        or with an error message if nothing worked.
    """
    if text is None:
        return ParseResult(error="No text to parse")

    ok, value = _try_loads(text)
    if ok:
        return ParseResult(value=value, strategy="direct")

    cleaned = text
    for name, strategy in CUMULATIVE_STRATEGIES:
        cleaned = strategy(cleaned)
        ok, value = _try_loads(cleaned)
        if ok:
            return ParseResult(value=value, strategy=name)

    for name, strategy in EXTRACTION_STRATEGIES:
        ok, value = _try_loads(strategy(cleaned))
        if ok:
            return ParseResult(value=value, strategy=name)

    return ParseResult(error=f"Could not parse JSON from LLM response: {text[:200]}...")


def load_llm_json(text: str) -> Any:
    """Like parse_llm_json, but returns the value or raises LLMJsonError."""
    result = parse_llm_json(text)
    if not result.ok:
        raise LLMJsonError(text or "")
    return result.value
