import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from blogposts.repos.posts_repo import FilesystemPostsRepo
from blogposts.routers import images, posts
from blogposts.security import get_api_key
from blogposts.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Blog Posts API", description="Read-only access to blog posts")


@asynccontextmanager
async def lifespan(app: FastAPI):
    post_files = FilesystemPostsRepo().list_post_files()
    logger.info(f"Serving {len(post_files)} post files from {settings.POSTS_DIR}")
    yield


app.router.lifespan_context = lifespan

app.include_router(images.router)
app.include_router(posts.router, dependencies=[Depends(get_api_key)])


@app.get("/")
async def root():
    return {"message": "Blog Posts API is running"}
