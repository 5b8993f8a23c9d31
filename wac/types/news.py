from typing import Literal, Optional

from pydantic import Field

from .base import CamelModel

NewsTrend = Literal["up", "down", "neutral"]


class NewsItem(CamelModel):
    id: str
    title: str
    description: str
    trend: NewsTrend = "neutral"
    percentage: Optional[str] = None
    timestamp: int = Field(description="Publication time in epoch milliseconds")
    source: Optional[str] = None
    category: Optional[str] = None
    url: Optional[str] = None
