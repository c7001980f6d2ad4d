import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

# Project root, e.g. /srv/scm-quoting
ROOT = Path(__file__).resolve().parents[3]

DATA_DIR = Path(os.getenv("SCM_DATA_DIR", str(ROOT / "data")))

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseModel):
    app_name: str = os.getenv("APP_NAME", "SCM Quoting Backend")
    environment: str = os.getenv("ENVIRONMENT", "dev")
    data_dir: str = str(DATA_DIR)
    database_url: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'app.db'}")
    debug: bool = os.getenv("DEBUG", "0") == "1"
    catalog_dir: str = os.getenv("SCM_CATALOG_DIR", str(ROOT / "knowledge" / "catalogs"))
    cors_origins: List[str] = _split_origins(os.getenv("CORS_ORIGINS", "")) or DEFAULT_CORS_ORIGINS

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
