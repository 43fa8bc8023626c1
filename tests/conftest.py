import textwrap
from pathlib import Path

import pytest

from blogposts.repos.posts_repo import FilesystemPostsRepo


def write_post(root: Path, relative: str, text: str) -> Path:
    """Write a dedented post file under root and return its path."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
    return path


@pytest.fixture
def posts_dir(tmp_path: Path) -> Path:
    root = tmp_path / "posts"
    root.mkdir()
    return root


@pytest.fixture
def repo(posts_dir: Path) -> FilesystemPostsRepo:
    return FilesystemPostsRepo(posts_dir, (".md", ".markdown"))


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    """

    def __init__(self, list_posts_return=None, get_post_return=None):
        self._list_posts_return = list_posts_return or []
        self._get_post_return = get_post_return
        self.calls = []

    def list_posts(self, include_drafts: bool = False):
        self.calls.append(("list_posts", include_drafts))
        return self._list_posts_return

    def get_post(self, slug: str, include_drafts: bool = False):
        self.calls.append(("get_post", slug, include_drafts))
        return self._get_post_return


class FakeChecker:
    """
    Content checker stand-in returning a canned report.
    """

    def __init__(self, report):
        self.report = report

    def check_all(self):
        return self.report
