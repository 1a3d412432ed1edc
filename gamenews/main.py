import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from gamenews.db.base import init_db
from gamenews.routers import admin, images, posts
from gamenews.security import get_api_key
from gamenews.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="GameNews API", description="Game news articles and curation")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database tables ready")
    yield


app.router.lifespan_context = lifespan

app.include_router(images.router)
app.include_router(posts.router)
app.include_router(admin.router, dependencies=[Depends(get_api_key)])


@app.get("/")
async def root():
    return {"message": "GameNews API is running"}
