"""Central configuration loaded from environment variables / .env file."""
import os
import tempfile
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

ROOT = Path(__file__).resolve().parent.parent

# ── Backend ────────────────────────────────────────────────────────────────
API_BASE_URL: str = os.getenv("API_BASE_URL", "https://fraud-backend-pxg9.onrender.com").rstrip("/")
FRAUD_API_STRICT: bool = os.getenv("FRAUD_API_STRICT", "true").lower() == "true"
TOP_CASES_LIMIT: int = int(os.getenv("TOP_CASES_LIMIT", "8"))

# Used when /api/years is unreachable
DEFAULT_YEARS: list[int] = [
    int(y) for y in os.getenv("DEFAULT_YEARS", "2021,2022,2023").split(",") if y.strip()
]

# ── Export ─────────────────────────────────────────────────────────────────
EXPORT_SETTLE_SECONDS: float = float(os.getenv("EXPORT_SETTLE_SECONDS", "0.3"))
EXPORT_SCALE: int = int(os.getenv("EXPORT_SCALE", "2"))
# per-export directories older than this are removed on the next export
EXPORT_MAX_AGE_SECONDS: float = float(os.getenv("EXPORT_MAX_AGE_SECONDS", "3600"))

_export_env = os.getenv("EXPORT_DIR", "")
EXPORT_DIR: Path = Path(_export_env) if _export_env else Path(tempfile.gettempdir()) / "fraud_dashboard_exports"

# ── UI ─────────────────────────────────────────────────────────────────────
APP_TITLE: str = os.getenv("APP_TITLE", "Prescription Fraud Detector")
