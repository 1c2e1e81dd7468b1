# server/main.py

import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from api import auth, images
from api.deps import media_store
from core.config import CORS_ORIGINS, LOG_LEVEL, MEDIA_URL_PREFIX
from core.errors import AuthenticationError, FeedError
from database import init_db


logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

init_db()

app = FastAPI(title="Image Feed API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FeedError)
async def handle_feed_error(request: Request, exc: FeedError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


app.include_router(auth.router)
app.include_router(images.router)

app.mount(MEDIA_URL_PREFIX, StaticFiles(directory=media_store.root), name="uploads")

logger.info("Serving media from %s", media_store.root.resolve())
