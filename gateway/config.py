import os
from dotenv import load_dotenv

load_dotenv()

FICHIERS_SERVICE_URLS = [
    url.strip().rstrip("/")
    for url in os.getenv("FICHIERS_SERVICE_URLS", "http://fichiers-service").split(",")
    if url.strip()
]
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
