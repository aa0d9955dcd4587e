"""DoReveal Tools API -- FastAPI entry point.

Run with: uvicorn server.app:app
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

# Load .env before anything reads DOREVEAL_* settings
from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from converter.service import MediaService
from server.routes import media

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Provisioning failure aborts startup
    service = MediaService.from_config()
    media.set_service(service)
    logger.info("FFmpeg ready in %s", service.bin_dir)
    yield


app = FastAPI(title="DoReveal Tools API", version="0.1.0", lifespan=lifespan)

# CORS -- allow all for local dev
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(media.router)


@app.get("/api/health")
def health(service: MediaService = Depends(media.get_service)) -> dict:
    bin_dir = service.bin_dir
    return {"status": "ok", "bin_dir": str(bin_dir) if bin_dir else None}
