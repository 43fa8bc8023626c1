import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from blogposts import dependencies as deps
from blogposts.services.markdown_inspector import get_content_type_from_filename

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/images/{image_path:path}")
def get_image(image_path: str, repo=Depends(deps.get_posts_repo)):
    """
    Serve an image stored alongside the posts
    """
    path = repo.resolve_asset(None, image_path)
    # Post sources live under the same root and must not leak through here
    if path is None or path.suffix.lower() in repo.extensions:
        raise HTTPException(status_code=404, detail="Image not found")

    try:
        image_data = path.read_bytes()
    except OSError as e:
        logger.error(f"Error reading image {image_path}: {e}")
        raise HTTPException(status_code=404, detail="Image not found")

    headers = {
        "Content-Length": str(len(image_data)),
        "Accept-Ranges": "bytes",
    }

    return Response(
        content=image_data,
        media_type=get_content_type_from_filename(path.name),
        headers=headers,
    )
