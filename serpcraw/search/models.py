"""
Result models for mobile SERP extraction.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PageType(str, Enum):
    """Classification of a destination URL."""

    HOMEPAGE = "homepage"
    INNER_PAGE = "inner_page"
    EMPTY_LINK = "empty_link"
    INVALID_LINK = "invalid_link"


class SerpSource(str, Enum):
    """Engine surface a record was extracted from."""

    BAIDU_MOBILE = "baidu_mobile"
    SHENMA_MOBILE = "shenma_mobile"


class ResultRecord(BaseModel):
    """
    One ranked entry from a search results page.

    `page_type` is always derived from `resolved_link`; construct records
    with `ResultRecord.build()`. A record whose page_type disagrees with
    its link is rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    rank: int = Field(..., ge=0, description="Position in the page (engine-specific base)")
    title: str = Field(default="", description="Display title")
    description: str = Field(default="", description="Snippet text")
    timestamp_text: str = Field(default="", description="Raw recency text, not parsed")
    resolved_link: str = Field(default="", description="Best-effort destination URL")
    display_link: str = Field(default="", description="Source text shown on the page")
    page_type: PageType = Field(..., description="Derived from resolved_link")
    source: SerpSource = Field(..., description="Engine surface")

    @model_validator(mode="after")
    def check_page_type(self) -> ResultRecord:
        """Ensure page_type matches the classification of resolved_link."""
        # Import here to avoid circular dependency
        from serpcraw.search.link_classifier import classify_link

        expected = classify_link(self.resolved_link)
        if self.page_type != expected:
            raise ValueError(
                f"page_type {self.page_type.value} does not match link "
                f"classification {expected.value}"
            )
        return self

    @classmethod
    def build(
        cls,
        *,
        rank: int,
        source: SerpSource,
        title: str = "",
        description: str = "",
        timestamp_text: str = "",
        resolved_link: str = "",
        display_link: str = "",
    ) -> ResultRecord:
        """Create a record, classifying its link."""
        from serpcraw.search.link_classifier import classify_link

        return cls(
            rank=rank,
            title=title,
            description=description,
            timestamp_text=timestamp_text,
            resolved_link=resolved_link,
            display_link=display_link,
            page_type=classify_link(resolved_link),
            source=source,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "rank": self.rank,
            "title": self.title,
            "description": self.description,
            "timestamp_text": self.timestamp_text,
            "resolved_link": self.resolved_link,
            "display_link": self.display_link,
            "page_type": self.page_type.value,
            "source": self.source.value,
        }
