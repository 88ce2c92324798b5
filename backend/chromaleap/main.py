# -*- coding: utf-8 -*-

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from chromaleap import __version__
from chromaleap.api.endpoints import analysis_router, pages_router
from chromaleap.config import get_settings
from chromaleap.storage import UPLOADS_ROUTE

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(title="ChromaLeap Analyst", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analysis_router)
app.include_router(pages_router)

settings.upload_dir.mkdir(parents=True, exist_ok=True)
app.mount(UPLOADS_ROUTE, StaticFiles(directory=str(settings.upload_dir)), name="uploads")

logger.info(
    "ChromaLeap Analyst ready (provider=%s, model=%s, uploads=%s)",
    settings.vision_provider,
    settings.model_name,
    settings.upload_dir,
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
