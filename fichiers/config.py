import os
from dotenv import load_dotenv

load_dotenv()

UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.abspath("uploads_files"))
DB_URL = os.getenv("DB_URL", "sqlite:///./fichiers.db")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

DB_CONNECT_ARGS = {"check_same_thread": False} if DB_URL.startswith("sqlite") else {}

# Deleting a file leaves its metadata row behind unless this is switched on.
DELETE_REMOVES_METADATA = os.getenv("DELETE_REMOVES_METADATA", "false").lower() in {"true", "1", "yes"}
