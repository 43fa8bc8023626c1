from fastapi import Depends

from blogposts.repos.posts_repo import FilesystemPostsRepo
from blogposts.security import get_settings
from blogposts.services.content_checker import ContentChecker
from blogposts.services.posts_service import PostsService
from blogposts.settings import Settings


def get_posts_repo(current_settings: Settings = Depends(get_settings)):
    return FilesystemPostsRepo(
        current_settings.POSTS_DIR, current_settings.POST_EXTENSIONS
    )


def get_posts_service(
    repo=Depends(get_posts_repo),
    current_settings: Settings = Depends(get_settings),
):
    return PostsService(
        repo=repo,
        words_per_minute=current_settings.WORDS_PER_MINUTE,
        images_url=current_settings.images_url,
    )


def get_content_checker(
    repo=Depends(get_posts_repo),
    current_settings: Settings = Depends(get_settings),
):
    return ContentChecker(
        repo=repo,
        require_timezone=current_settings.REQUIRE_TIMEZONE,
        duplicate_threshold=current_settings.DUPLICATE_THRESHOLD,
    )
