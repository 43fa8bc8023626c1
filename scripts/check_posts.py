import argparse
import logging
import sys

from blogposts.repos.posts_repo import FilesystemPostsRepo
from blogposts.schemas.report import CheckReport
from blogposts.services.content_checker import ContentChecker
from blogposts.settings import settings

logger = logging.getLogger(__name__)


def format_report(report: CheckReport) -> str:
    lines = []
    for issue in sorted(report.issues, key=lambda i: (i.path, i.line or 0, i.code)):
        location = f"{issue.path}:{issue.line}" if issue.line else issue.path
        lines.append(f"{location}: {issue.severity}: {issue.message} [{issue.code}]")

    for group in report.duplicates:
        lines.append(
            f"duplicates ({group.reason}, {group.similarity:.0%}): "
            f"{group.canonical} <- {', '.join(group.duplicates)}"
        )

    lines.append(
        f"{report.checked} posts checked, {report.error_count} errors, "
        f"{report.warning_count} warnings, {len(report.duplicates)} duplicate groups"
    )
    return "\n".join(lines)


def main(argv=None) -> int:
    arg_parser = argparse.ArgumentParser(description="Check blog post files")
    arg_parser.add_argument("--posts-dir", default=settings.POSTS_DIR)
    arg_parser.add_argument("--json", action="store_true", help="print JSON report")
    args = arg_parser.parse_args(argv)

    checker = ContentChecker(FilesystemPostsRepo(args.posts_dir))
    report = checker.check_all()

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print(format_report(report))

    return 0 if report.ok else 1


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    sys.exit(main())
