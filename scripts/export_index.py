import argparse
import json
import logging
import sys
from pathlib import Path

from blogposts.repos.posts_repo import FilesystemPostsRepo
from blogposts.services.posts_service import PostsService
from blogposts.settings import settings

logger = logging.getLogger(__name__)


def build_index(posts_dir: str, include_drafts: bool = False) -> list[dict]:
    service = PostsService(FilesystemPostsRepo(posts_dir))
    return [
        post.model_dump() for post in service.list_posts(include_drafts=include_drafts)
    ]


def main(argv=None) -> int:
    arg_parser = argparse.ArgumentParser(description="Export the published post index")
    arg_parser.add_argument("--posts-dir", default=settings.POSTS_DIR)
    arg_parser.add_argument("--drafts", action="store_true", help="include drafts")
    arg_parser.add_argument("--output", help="write to this file instead of stdout")
    args = arg_parser.parse_args(argv)

    index = build_index(args.posts_dir, include_drafts=args.drafts)
    payload = json.dumps(index, indent=2)

    if args.output:
        Path(args.output).write_text(payload + "\n", encoding="utf-8")
        logger.info(f"Wrote {len(index)} posts to {args.output}")
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    sys.exit(main())
