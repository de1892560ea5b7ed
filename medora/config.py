"""
Medora API - Configuration
==========================
Centralised settings loaded from the environment and the project-level
.env file.
"""

import os
import secrets
from pathlib import Path
from dotenv import load_dotenv

# ── Paths ───────────────────────────────────────────────────────────────
PACKAGE_DIR = Path(__file__).resolve().parent                   # medora/
PROJECT_ROOT = PACKAGE_DIR.parent

# ── Load .env ───────────────────────────────────────────────────────────
load_dotenv(PROJECT_ROOT / ".env")


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


API_TITLE = "Medora Health Record API"
API_VERSION = "1.0.0"

# ── Auth ────────────────────────────────────────────────────────────────
# Without JWT_SECRET a random per-process key is used: tokens then die with
# the process and cannot be minted elsewhere. create_app warns about it.
JWT_SECRET_FROM_ENV: bool = bool(os.getenv("JWT_SECRET"))
JWT_SECRET: str = os.getenv("JWT_SECRET") or secrets.token_urlsafe(32)
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# Bootstrap superadmin, registered at start-up. The id is random unless
# MEDORA_SUPERADMIN_ID is set; scripts/create_superadmin.py needs it set
# (together with JWT_SECRET) to mint tokens offline.
SUPERADMIN_ID_FROM_ENV: bool = bool(os.getenv("MEDORA_SUPERADMIN_ID"))
SUPERADMIN_ID: str = os.getenv("MEDORA_SUPERADMIN_ID") or f"superadmin-{secrets.token_hex(8)}"
SUPERADMIN_NAME: str = os.getenv("MEDORA_SUPERADMIN_NAME", "Medora Super Admin")
SUPERADMIN_EMAIL: str = os.getenv("MEDORA_SUPERADMIN_EMAIL", "superadmin@medora.local")
SUPERADMIN_PASSWORD: str = os.getenv("MEDORA_SUPERADMIN_PASSWORD", "")

# ── Logging ─────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("MEDORA_LOG_LEVEL", "INFO")
LOG_FILE: str = os.getenv("MEDORA_LOG_FILE", "")

# ── Push notifications (Expo) ───────────────────────────────────────────
PUSH_ENABLED: bool = _env_bool("MEDORA_PUSH_ENABLED", False)
EXPO_PUSH_URL: str = os.getenv("EXPO_PUSH_URL", "https://exp.host/--/api/v2/push/send")
PUSH_TIMEOUT_SECONDS: float = float(os.getenv("MEDORA_PUSH_TIMEOUT", "10"))

# ── HTTP server ─────────────────────────────────────────────────────────
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "5000"))

# ── Listing defaults ────────────────────────────────────────────────────
DEFAULT_PAGE_SIZE = 10
DASHBOARD_ITEMS = 5
