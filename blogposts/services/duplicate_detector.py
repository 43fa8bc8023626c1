import logging
import re
from difflib import SequenceMatcher
from typing import Dict, List, Sequence

from blogposts.schemas.post import Post
from blogposts.schemas.report import DuplicateGroup
from blogposts.services.front_matter import to_timestamp
from blogposts.settings import settings

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"[^\w]+")


def normalize_title(title: str) -> str:
    return " ".join(_NON_WORD.sub(" ", title.lower()).split())


def normalize_body(body: str) -> str:
    return " ".join(body.lower().split())


def body_similarity(a: str, b: str, threshold: float = 0.0) -> float:
    """Word-level similarity of two normalized bodies, 0.0 when either is empty."""
    words_a, words_b = a.split(), b.split()
    if not words_a or not words_b:
        return 0.0
    matcher = SequenceMatcher(None, words_a, words_b, autojunk=False)
    # Cheap upper bounds first; ratio() is quadratic
    if matcher.real_quick_ratio() < threshold or matcher.quick_ratio() < threshold:
        return 0.0
    return matcher.ratio()


class _Groups:
    """Disjoint sets of post file paths."""

    def __init__(self, paths):
        self.parent = {path: path for path in paths}

    def find(self, path: str) -> str:
        while self.parent[path] != path:
            self.parent[path] = self.parent[self.parent[path]]
            path = self.parent[path]
        return path

    def union(self, a: str, b: str) -> None:
        root_a, root_b = self.find(a), self.find(b)
        if root_a != root_b:
            self.parent[max(root_a, root_b)] = min(root_a, root_b)


def find_duplicates(
    posts: Sequence[Post], threshold: float | None = None
) -> List[DuplicateGroup]:
    """
    Group posts that look like versions of the same article.

    Two posts belong together when their normalized titles are equal or when
    their normalized bodies reach the similarity threshold. Grouping is
    transitive, so every post lands in at most one group. Posts are keyed by
    file path, so files that share a slug are still compared.
    """
    threshold = settings.DUPLICATE_THRESHOLD if threshold is None else threshold
    by_path = {post.path: post for post in posts}
    titles = {post.path: normalize_title(post.title) for post in posts}
    bodies = {post.path: normalize_body(post.body) for post in posts}

    groups = _Groups(by_path)
    title_matched = set()
    best_similarity: Dict[str, float] = {}

    paths = sorted(by_path)
    for i, a in enumerate(paths):
        for b in paths[i + 1 :]:
            same_title = bool(titles[a]) and titles[a] == titles[b]
            similarity = body_similarity(
                bodies[a], bodies[b], 0.0 if same_title else threshold
            )
            if not same_title and similarity < threshold:
                continue

            logger.debug(
                f"Possible duplicates {a} and {b} "
                f"(same title: {same_title}, similarity: {similarity:.2f})"
            )
            groups.union(a, b)
            if same_title:
                title_matched.update((a, b))
            for path in (a, b):
                best_similarity[path] = max(
                    best_similarity.get(path, 0.0), similarity
                )

    members: Dict[str, List[Post]] = {}
    for path in paths:
        members.setdefault(groups.find(path), []).append(by_path[path])

    result = []
    for group in members.values():
        if len(group) < 2:
            continue
        canonical = pick_canonical(group)
        others = sorted(
            (p for p in group if p is not canonical), key=lambda p: (p.slug, p.path)
        )
        group_paths = [post.path for post in group]
        reason = "title" if title_matched.intersection(group_paths) else "body"
        result.append(
            DuplicateGroup(
                canonical=canonical.slug,
                duplicates=[p.slug for p in others],
                paths=[canonical.path] + [p.path for p in others],
                reason=reason,
                similarity=round(
                    max(best_similarity.get(p, 0.0) for p in group_paths), 4
                ),
            )
        )

    return sorted(result, key=lambda g: (g.canonical, g.paths[0]))


def pick_canonical(group: Sequence[Post]) -> Post:
    """Published beats draft, then the newest date, then the longest body."""

    def _timestamp(post: Post) -> float:
        timestamp = to_timestamp(post.date)
        return float("-inf") if timestamp is None else timestamp

    ranked = sorted(
        group,
        key=lambda p: (p.draft, -_timestamp(p), -len(p.body), p.slug, p.path),
    )
    return ranked[0]
