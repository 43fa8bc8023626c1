import logging
import posixpath
from collections import Counter
from pathlib import Path
from typing import List, Optional

from blogposts.schemas.post import Post, PostDetail, PostSummary
from blogposts.services.front_matter import (
    FrontMatterError,
    coerce_date,
    coerce_draft,
    parse_front_matter,
    to_timestamp,
)
from blogposts.services.markdown_inspector import process_image_references
from blogposts.settings import settings
from blogposts.utils import calculate_reading_time

logger = logging.getLogger(__name__)


class PostsService:
    def __init__(
        self,
        repo,
        *,
        words_per_minute: int | None = None,
        images_url: str | None = None,
    ):
        self.repo = repo
        self.words_per_minute = words_per_minute or settings.WORDS_PER_MINUTE
        self.images_url = images_url or settings.images_url

    def load_posts(self) -> List[Post]:
        posts = []
        for path in self.repo.list_post_files():
            post = parse_post(path, repo=self.repo)
            if post:
                posts.append(post)
        return posts

    def list_posts(self, include_drafts: bool = False) -> List[PostSummary]:
        """The published index: drafts left out unless asked, newest first."""
        posts = [p for p in self.load_posts() if include_drafts or not p.draft]
        posts = self._served(posts)
        posts.sort(key=_sort_key)
        return [self._summary(p) for p in posts]

    def get_post(
        self, slug: str, include_drafts: bool = False
    ) -> Optional[PostDetail]:
        path = self.repo.get_post_file(slug)
        if not path:
            return None
        post = parse_post(path, repo=self.repo)
        if not post or (post.draft and not include_drafts):
            return None

        post_dir = posixpath.dirname(post.path)
        content = process_image_references(post.body, self.images_url, post_dir)
        return PostDetail(**self._summary(post).model_dump(), content=content)

    def _served(self, posts: List[Post]) -> List[Post]:
        # Files sharing a slug: keep the one get_post resolves the slug to
        counts = Counter(post.slug for post in posts)
        served = []
        for post in posts:
            if counts[post.slug] > 1:
                path = self.repo.get_post_file(post.slug)
                if path is None or self.repo.relative_path(path) != post.path:
                    logger.warning(f"Skipping {post.path}: slug {post.slug} is taken")
                    continue
            served.append(post)
        return served

    def _summary(self, post: Post) -> PostSummary:
        summary = post.metadata.get("summary") or post.metadata.get("description")
        return PostSummary(
            slug=post.slug,
            title=_derive_title(post.title, post.slug),
            date=post.date.isoformat() if post.date else None,
            draft=post.draft,
            summary=str(summary) if summary else None,
            tags=_normalize_tags(post.metadata.get("tags")),
            readingTime=calculate_reading_time(post.body, self.words_per_minute),
        )


def parse_post(path: Path, *, repo) -> Optional[Post]:
    """Read a post file and parse its header; None when it cannot be used."""
    slug = repo.slug_for(path)
    try:
        text = repo.read_text(path)
    except OSError as e:
        logger.warning(f"Failed to read post {slug}: {e}")
        return None

    try:
        metadata, body, fmt = parse_front_matter(text)
    except FrontMatterError as e:
        logger.warning(f"Failed to parse post {slug}: {e}")
        return None

    draft = coerce_draft(metadata.get("draft", False))
    if draft is None:
        logger.warning(f"Post {slug} has a non-boolean draft flag, treating as draft")
        draft = True

    return Post(
        path=repo.relative_path(path),
        slug=slug,
        title=_coerce_title(metadata.get("title")),
        date=coerce_date(metadata.get("date")),
        draft=draft,
        body=body,
        metadata=metadata,
        format=fmt,
    )


def _coerce_title(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _derive_title(title: str, slug: str) -> str:
    if title:
        return title
    clean_slug = slug.rsplit("/", 1)[-1]
    clean_slug = clean_slug.replace("-", " ").replace("_", " ")
    return clean_slug.title()


def _normalize_tags(value) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple, set)):
        return [str(item) for item in value if item]
    return [str(value)]


def _sort_key(post: Post):
    timestamp = to_timestamp(post.date)
    if timestamp is None:
        return (1, 0.0, post.slug)
    return (0, -timestamp, post.slug)
