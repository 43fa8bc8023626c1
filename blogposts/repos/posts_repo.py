import logging
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional

from blogposts.settings import settings

logger = logging.getLogger(__name__)


class FilesystemPostsRepo:
    """Read-only access to a directory of post files."""

    def __init__(
        self,
        root: Path | str | None = None,
        extensions: Iterable[str] | None = None,
    ):
        self.root = Path(root if root is not None else settings.POSTS_DIR)
        self.extensions = tuple(
            ext.lower() for ext in (extensions or settings.POST_EXTENSIONS)
        )

    def list_post_files(self) -> List[Path]:
        if not self.root.is_dir():
            logger.warning(f"Posts directory not found: {self.root}")
            return []

        files = [
            path
            for path in self.root.rglob("*")
            if path.is_file() and self._is_post_file(path)
        ]
        return sorted(files, key=self.relative_path)

    def get_post_file(self, slug: str) -> Optional[Path]:
        if not slug or slug.startswith("/") or ".." in Path(slug).parts:
            return None

        candidates = [self.root / f"{slug}{ext}" for ext in self.extensions]
        candidates += [self.root / slug / f"index{ext}" for ext in self.extensions]
        for candidate in candidates:
            if candidate.is_file() and self._is_post_file(candidate):
                return candidate
        return None

    def read_text(self, path: Path) -> str:
        return Path(path).read_text(encoding="utf-8", errors="replace")

    def relative_path(self, path: Path) -> str:
        return Path(path).relative_to(self.root).as_posix()

    def slug_for(self, path: Path) -> str:
        relative = PurePosixPath(self.relative_path(path))
        # Page bundles: blog/some-post/index.md is served as blog/some-post
        if relative.stem == "index" and relative.parent != PurePosixPath("."):
            return relative.parent.as_posix()
        return relative.with_suffix("").as_posix()

    def resolve_asset(self, post_path: Path | None, ref: str) -> Optional[Path]:
        """Resolve an image or file reference from a post to a file under root."""
        ref = ref.split("#", 1)[0].split("?", 1)[0].strip()
        if not ref:
            return None

        if ref.startswith("/"):
            candidate = self.root / ref.lstrip("/")
        elif post_path is not None:
            candidate = Path(post_path).parent / ref
        else:
            candidate = self.root / ref

        try:
            resolved = candidate.resolve()
            relative = resolved.relative_to(self.root.resolve())
        except (OSError, ValueError):
            return None

        # Hidden files and directories (.env, .git) are never assets
        if any(part.startswith(".") for part in relative.parts):
            return None
        return resolved if resolved.is_file() else None

    def _is_post_file(self, path: Path) -> bool:
        relative = path.relative_to(self.root)
        if any(part.startswith(".") for part in relative.parts):
            return False
        if path.name.startswith("_index."):
            return False
        return path.suffix.lower() in self.extensions
