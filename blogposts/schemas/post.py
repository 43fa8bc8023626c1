import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class Post(BaseModel):
    """A post file as read from disk: front-matter fields plus markdown body."""

    path: str
    slug: str
    title: str = ""
    date: Optional[datetime.datetime] = None
    draft: bool = False
    body: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)
    format: Optional[Literal["yaml", "toml", "json"]] = None


class PostSummary(BaseModel):
    slug: str
    title: str
    date: Optional[str] = None
    draft: bool = False
    summary: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    readingTime: Optional[str] = None


class PostDetail(PostSummary):
    content: str
