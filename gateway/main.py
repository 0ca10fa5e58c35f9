import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gateway.client import LoadBalancedClient
from gateway.config import CORS_ORIGINS, FICHIERS_SERVICE_URLS
from gateway.routes import router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("gateway")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    app.state.fichiers_client.close()


app = FastAPI(title="API Service", version="1.0.0", lifespan=lifespan)

origins = [origin.strip() for origin in CORS_ORIGINS.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.fichiers_client = LoadBalancedClient(FICHIERS_SERVICE_URLS)
logger.info("Forwarding file requests to %s", ", ".join(FICHIERS_SERVICE_URLS))

app.include_router(router)
