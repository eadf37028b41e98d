# models.py
#
# Description:
# This module defines the Pydantic data models used throughout the image finder.
# Provider responses are normalised into ImageCandidate objects, and a successful
# download is described by an immutable ImageDescriptor.

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ImageProvider(str, Enum):
    """Supported stock photo providers, in cascade priority order."""
    PEXELS = "Pexels"
    UNSPLASH = "Unsplash"
    PIXABAY = "Pixabay"
    WIKIMEDIA = "Wikimedia"


class ImageCandidate(BaseModel):
    """A single, unconfirmed search result from a provider."""
    title: str = Field("", description="Free text title, used for scoring.")
    description: str = Field("", description="Free text description, used for scoring.")
    url: str = Field(..., description="URL of the full-resolution asset.")
    thumb_url: str = Field("", description="URL of a small preview.")
    width: int = Field(0, ge=0, description="Width in pixels.")
    height: int = Field(0, ge=0, description="Height in pixels.")
    license: str = Field("", description="License name, e.g. 'Pexels License'.")
    author: str = Field("", description="Photographer or uploader.")
    author_url: str = Field("", description="Link to the author's profile.")
    provider: ImageProvider = Field(..., description="The adapter that produced this result.")
    query: str = Field("", description="The search query that produced this result.")
    score: int = Field(0, description="Relevance score assigned by the cascade.")


class RecipeImageRequest(BaseModel):
    """The recipe metadata needed to look up an image."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., description="Recipe title, e.g. 'Rigatoni alla Norma'.")
    category: str = Field("", description="Recipe category, e.g. 'Pasta'.")
    slug: str = Field("", description="URL slug of the recipe page.")
    image_keywords: List[str] = Field(
        default_factory=list,
        alias="imageKeywords",
        description="English search keywords suggested by the LLM.",
    )


class ImageDescriptor(BaseModel):
    """A downloaded image, ready to be embedded into a page and the site index."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    local_path: str = Field(..., alias="localPath")
    relative_path: str = Field(..., alias="relativePath")
    home_relative_path: str = Field(..., alias="homeRelativePath")
    url: str
    thumb_url: str = Field("", alias="thumbUrl")
    attribution: str
    license: str
    author: str
    provider: ImageProvider
    width: int
    height: int
