"""Configuration: env, data paths, SFTP and CDN credentials."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of dimagram package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so DIMAGRAM_SFTP_HOST etc. are set
load_dotenv(BASE_DIR / ".env")

DATA_DIR = Path(os.getenv("DIMAGRAM_DATA_DIR", str(BASE_DIR / "data")))
UPLOADS_DIR = DATA_DIR / "uploads"
FRONTEND_DIR = Path(os.getenv("DIMAGRAM_FRONTEND_DIR", str(BASE_DIR / "frontend")))

# API
API_HOST = os.getenv("DIMAGRAM_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("DIMAGRAM_API_PORT", "8080"))
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("DIMAGRAM_CORS_ORIGINS", "http://localhost:3000").split(",")
    if o.strip()
]

# Remote file store (SFTP). Either password or private key path.
SFTP_HOST = os.getenv("DIMAGRAM_SFTP_HOST", "")
SFTP_PORT = os.getenv("DIMAGRAM_SFTP_PORT", "22")
SFTP_USER = os.getenv("DIMAGRAM_SFTP_USER", "")
SFTP_PASSWORD = os.getenv("DIMAGRAM_SFTP_PASSWORD", "")
SFTP_PRIVATE_KEY_PATH = os.getenv("DIMAGRAM_SFTP_PRIVATE_KEY_PATH", "")
# Extra known_hosts file; system host keys are always loaded
SFTP_KNOWN_HOSTS = os.getenv("DIMAGRAM_SFTP_KNOWN_HOSTS", "")
SFTP_INSECURE_SKIP_HOST_KEY_CHECK = os.getenv(
    "DIMAGRAM_SFTP_INSECURE_SKIP_HOST_KEY_CHECK", "0"
).lower() in ("1", "true", "yes")
SFTP_TIMEOUT_SEC = 15.0

# Remote layout
POINTER_NAME = "today.json"
CONTENT_DIR = "content"

# CDN (bunny.net pull zone in front of the SFTP storage)
CDN_API_KEY = os.getenv("DIMAGRAM_CDN_API_KEY", "")
CDN_URL = os.getenv("DIMAGRAM_CDN_URL", "")
CDN_PURGE_ENDPOINT = os.getenv("DIMAGRAM_CDN_PURGE_ENDPOINT", "https://api.bunny.net/purge")
CDN_TIMEOUT_SEC = 10.0


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
