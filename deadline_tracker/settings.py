from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field

log = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parents[1] / "config" / "settings.yaml"


class AppConfig(BaseModel):
    title: str = "IB Scheduler List"
    welcome: str = "IBDP Schedule for the 2025-2026 academic year."
    tagline: str = "Select your subjects and manage your assignments"


class UploadConfig(BaseModel):
    accepted_extensions: List[str] = Field(default_factory=lambda: [".xlsx", ".xls"])


class SubjectsConfig(BaseModel):
    max_selected: int = 6
    suggest_cutoff: int = 85


class LoggingConfig(BaseModel):
    level: str = "INFO"


class Settings(BaseModel):
    app: AppConfig = Field(default_factory=AppConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)
    subjects: SubjectsConfig = Field(default_factory=SubjectsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(path: str | Path = DEFAULT_SETTINGS_PATH) -> Settings:
    path = Path(path)
    if not path.exists():
        log.warning("settings file %s not found, using defaults", path)
        return Settings()
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return Settings(
        app=AppConfig(**(data.get("app") or {})),
        upload=UploadConfig(**(data.get("upload") or {})),
        subjects=SubjectsConfig(**(data.get("subjects") or {})),
        logging=LoggingConfig(**(data.get("logging") or {})),
    )
