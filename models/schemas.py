"""
Data Models / Schemas
Value types shared by the source client, the classifier and the pipeline
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class MemeReference(BaseModel):
    """One meme fetched from the random source. ``url`` is its identity."""
    url: str = Field(..., min_length=1, description="Image URL, used as the deduplication key")
    title: Optional[str] = Field(None, description="Post title")
    subreddit: Optional[str] = Field(None, description="Origin subreddit")
    post_link: Optional[str] = Field(None, description="Link to the original post")
    author: Optional[str] = Field(None, description="Post author")
    ups: int = Field(default=0, description="Upvotes")
    nsfw: bool = Field(default=False, description="Marked NSFW")
    spoiler: bool = Field(default=False, description="Marked spoiler")
    preview: List[str] = Field(default_factory=list, description="Preview image URLs, smallest first")

    @property
    def identity_key(self) -> str:
        return self.url


class Classification(BaseModel):
    """One (label, confidence) pair produced by a classifier"""
    label: str = Field(..., min_length=1, description="Emotion label")
    score: float = Field(..., ge=0.0, le=1.0, description="Confidence in [0, 1]")

    @property
    def percent(self) -> int:
        """Confidence as a whole percentage for display"""
        return round(self.score * 100)
