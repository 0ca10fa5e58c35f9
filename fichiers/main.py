import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fichiers.api.routes import metrics_router, router
from fichiers.config import CORS_ORIGINS, UPLOAD_DIR
from fichiers.core.exceptions import register_exception_handlers
from fichiers.db import init_db
from fichiers.storage import FileStorage

app = FastAPI(title="Fichiers Service", version="1.0.0")

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("fichiers")

origins = [origin.strip() for origin in CORS_ORIGINS.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

init_db()

app.state.storage = FileStorage(UPLOAD_DIR)
logger.info("Storing uploaded files in %s", app.state.storage.root)

app.include_router(router)
app.include_router(metrics_router)
register_exception_handlers(app)
