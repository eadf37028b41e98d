# image_scoring.py
#
# Description:
# Heuristic relevance scoring for stock photo candidates. The point values are
# fixed: keyword overlap dominates, with small nudges for layout fit and
# resolution.

import re
from typing import AbstractSet, Sequence

import config
from models import ImageCandidate

TITLE_KEYWORD_POINTS = 10
DESCRIPTION_KEYWORD_POINTS = 5
LANDSCAPE_POINTS = 3
HIGH_RESOLUTION_POINTS = 2
HIGH_RESOLUTION_WIDTH = 1200
LOW_RESOLUTION_PENALTY = 2
LOW_RESOLUTION_WIDTH = 800
CAMERA_FILENAME_PENALTY = 3

# Titles like "IMG_2041" or "DSC01234.jpg" carry no editorial meaning
CAMERA_FILENAME_PATTERN = re.compile(r"^(IMG|DSC|P\d|DSCN)", re.IGNORECASE)


def score_image(candidate: ImageCandidate, keywords: Sequence[str]) -> int:
    """Returns the relevance score of a candidate for the given keywords."""
    score = 0
    title = (candidate.title or "").lower()
    description = (candidate.description or "").lower()

    for keyword in keywords:
        keyword = keyword.lower()
        if not keyword:
            continue
        if keyword in title:
            score += TITLE_KEYWORD_POINTS
        if keyword in description:
            score += DESCRIPTION_KEYWORD_POINTS

    if candidate.width > candidate.height:
        score += LANDSCAPE_POINTS
    if candidate.width >= HIGH_RESOLUTION_WIDTH:
        score += HIGH_RESOLUTION_POINTS
    if candidate.width < LOW_RESOLUTION_WIDTH:
        score -= LOW_RESOLUTION_PENALTY

    if CAMERA_FILENAME_PATTERN.match(candidate.title or ""):
        score -= CAMERA_FILENAME_PENALTY

    return score


def apply_duplicate_penalty(score: int, url: str, used_urls: AbstractSet[str]) -> int:
    """Demotes a score whose image was already used in this batch."""
    if url in used_urls:
        return score - config.DUPLICATE_PENALTY
    return score


def is_duplicate_score(score: int) -> bool:
    return score <= config.DUPLICATE_FLOOR
