import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from blogposts import dependencies as deps
from blogposts.schemas.post import PostDetail, PostSummary
from blogposts.schemas.report import CheckReport
from blogposts.services.content_checker import ContentChecker
from blogposts.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts", response_model=List[PostSummary])
def list_posts(
    drafts: bool = False,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get the published index, newest first."""
    try:
        return service.list_posts(include_drafts=drafts)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/posts/{slug:path}", response_model=PostDetail)
def get_post(
    slug: str,
    drafts: bool = False,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get a single post by slug."""
    try:
        post = service.get_post(slug, include_drafts=drafts)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return post
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to retrieve post")


@router.get("/check", response_model=CheckReport)
def check_posts(checker: ContentChecker = Depends(deps.get_content_checker)):
    """Validate every post file and report near-duplicates."""
    try:
        return checker.check_all()
    except Exception as e:
        logger.error(f"Unexpected error checking posts: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to check posts")
