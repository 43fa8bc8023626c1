import datetime
import logging
from pathlib import Path
from typing import Dict, List, Optional

from blogposts.schemas.report import CheckReport, Issue
from blogposts.services.duplicate_detector import find_duplicates
from blogposts.services.front_matter import (
    FrontMatterError,
    coerce_date,
    coerce_draft,
    detect_format,
    is_timezone_aware,
    parse_front_matter,
    to_timestamp,
)
from blogposts.services.markdown_inspector import (
    extract_code_blocks,
    extract_images,
    find_typos,
    is_relative_ref,
)
from blogposts.services.posts_service import PostsService
from blogposts.settings import settings

logger = logging.getLogger(__name__)


class ContentChecker:
    def __init__(
        self,
        repo,
        *,
        require_timezone: bool | None = None,
        duplicate_threshold: float | None = None,
        typos: Dict[str, str] | None = None,
        now: datetime.datetime | None = None,
    ):
        self.repo = repo
        self.require_timezone = (
            settings.REQUIRE_TIMEZONE if require_timezone is None else require_timezone
        )
        self.duplicate_threshold = duplicate_threshold
        self.typos = typos
        self.now = now

    def check_all(self) -> CheckReport:
        """Check every post file, then look for near-duplicate posts."""
        report = CheckReport()
        files = self.repo.list_post_files()
        report.issues.extend(_slug_collisions(files, self.repo))
        for path in files:
            report.checked += 1
            try:
                text = self.repo.read_text(path)
            except OSError as e:
                logger.warning(f"Failed to read {path}: {e}")
                report.issues.append(
                    Issue(
                        path=self.repo.relative_path(path),
                        severity="error",
                        code="unreadable",
                        message=str(e),
                    )
                )
                continue

            report.issues.extend(
                check_post(
                    path,
                    text,
                    repo=self.repo,
                    require_timezone=self.require_timezone,
                    typos=self.typos,
                    now=self.now,
                )
            )

        posts = PostsService(self.repo).load_posts()
        report.duplicates = find_duplicates(posts, self.duplicate_threshold)

        logger.info(
            f"Checked {report.checked} posts: {report.error_count} errors, "
            f"{report.warning_count} warnings, "
            f"{len(report.duplicates)} duplicate groups"
        )
        return report


def check_post(
    path: Path,
    text: str,
    *,
    repo,
    require_timezone: bool = True,
    typos: Dict[str, str] | None = None,
    now: datetime.datetime | None = None,
) -> List[Issue]:
    """Return every content problem found in one post file."""
    relative = repo.relative_path(path)
    issues: List[Issue] = []

    def add(severity, code, message, line: Optional[int] = None):
        issues.append(
            Issue(
                path=relative,
                severity=severity,
                code=code,
                message=message,
                line=line,
            )
        )

    if detect_format(text) is None:
        add("error", "front-matter-missing", "No front-matter header found")
        body = text
    else:
        try:
            metadata, body, _ = parse_front_matter(text)
        except FrontMatterError as e:
            add("error", "front-matter-invalid", str(e), 1)
            return issues
        _check_metadata(metadata, add, require_timezone, now)

    offset = _body_line_offset(text, body)
    _check_body(path, body, offset, add, repo, typos)
    return issues


def _slug_collisions(files: List[Path], repo) -> List[Issue]:
    """Files that map to the same slug; only one of them can ever be served."""
    by_slug: Dict[str, List[str]] = {}
    for path in files:
        by_slug.setdefault(repo.slug_for(path), []).append(repo.relative_path(path))

    issues = []
    for slug, paths in by_slug.items():
        if len(paths) < 2:
            continue
        served = repo.get_post_file(slug)
        served = repo.relative_path(served) if served else None
        for path in paths:
            others = ", ".join(p for p in paths if p != path)
            message = f"Slug '{slug}' is also used by {others}"
            if path != served:
                message += "; this file is never served"
            issues.append(
                Issue(
                    path=path,
                    severity="error",
                    code="slug-collision",
                    message=message,
                )
            )
    return issues


def _check_metadata(metadata: dict, add, require_timezone: bool, now):
    title = metadata.get("title")
    if title is None or not str(title).strip():
        add("error", "title-missing", "Post has no title")

    draft_value = metadata.get("draft", False)
    draft = coerce_draft(draft_value)
    if draft is None:
        add(
            "error",
            "draft-invalid",
            f"draft must be true or false, got {draft_value!r}",
        )

    if "date" not in metadata or metadata["date"] in (None, ""):
        add("error", "date-missing", "Post has no date")
        return

    date = coerce_date(metadata["date"])
    if date is None:
        add("error", "date-invalid", f"Unparseable date {metadata['date']!r}")
        return

    if require_timezone and not is_timezone_aware(date):
        add(
            "warning",
            "date-naive",
            f"Date {date.isoformat()} has no timezone offset",
        )

    now = now or datetime.datetime.now(datetime.timezone.utc)
    if draft is False and to_timestamp(date) > to_timestamp(now):
        add(
            "warning",
            "date-future",
            f"Published post is dated in the future ({date.isoformat()})",
        )


def _check_body(path: Path, body: str, offset: int, add, repo, typos):
    if not body.strip():
        add("warning", "body-empty", "Post body is empty")
        return

    for block in extract_code_blocks(body):
        if not block.closed:
            add(
                "error",
                "code-fence-unclosed",
                "Code fence is never closed",
                block.line + offset,
            )
        if not block.language:
            add(
                "warning",
                "code-fence-untagged",
                "Code fence has no language tag",
                block.line + offset,
            )

    for image in extract_images(body):
        target = image.target
        # Leading-slash paths point at the site's static files, not the corpus
        if not is_relative_ref(target) or target.startswith("/"):
            continue
        if repo.resolve_asset(path, target) is None:
            add(
                "warning",
                "image-missing",
                f"Image {target} not found",
                image.line + offset,
            )

    for typo in find_typos(body, typos):
        add(
            "warning",
            "typo",
            f"'{typo.word}' looks misspelled, did you mean '{typo.suggestion}'?",
            typo.line + offset,
        )


def _body_line_offset(text: str, body: str) -> int:
    """Number of file lines before the first line of the body."""
    stripped = text.rstrip()
    if not body or not stripped.endswith(body.rstrip()):
        return 0
    return stripped[: len(stripped) - len(body.rstrip())].count("\n")
