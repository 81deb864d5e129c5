from __future__ import annotations

import os
from pathlib import Path
from typing import List


class Settings:
    """Centralized configuration for the pet health backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("PETHEALTH_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("PETHEALTH_DB_PATH") or (self.data_root / "pethealth.db")
        ).expanduser()
        self.log_level: str = (os.environ.get("PETHEALTH_LOG_LEVEL") or "INFO").upper()

        # ---- Due-date policy ----
        self.due_soon_days: int = int(os.environ.get("PETHEALTH_DUE_SOON_DAYS") or "30")
        self.upcoming_horizon_days: int = int(os.environ.get("PETHEALTH_UPCOMING_HORIZON_DAYS") or "30")

        # ---- Health score policy (weights must sum to 100) ----
        self.recent_checkup_days: int = int(os.environ.get("PETHEALTH_RECENT_CHECKUP_DAYS") or "365")
        self.stale_checkup_days: int = int(os.environ.get("PETHEALTH_STALE_CHECKUP_DAYS") or "730")
        self.overdue_penalty: int = int(os.environ.get("PETHEALTH_OVERDUE_PENALTY") or "10")
        self.weight_recency: int = int(os.environ.get("PETHEALTH_WEIGHT_RECENCY") or "30")
        self.weight_compliance: int = int(os.environ.get("PETHEALTH_WEIGHT_COMPLIANCE") or "40")
        self.weight_hygiene: int = int(os.environ.get("PETHEALTH_WEIGHT_HYGIENE") or "30")

        cors = os.environ.get("PETHEALTH_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
