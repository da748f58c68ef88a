from __future__ import annotations

from typing import Optional

import yaml
from pydantic import BaseModel


class AppConfig(BaseModel):
    topic: Optional[str] = None
    script_path: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    fps: Optional[int] = None
    tick_rate: Optional[int] = None
    output_dir: Optional[str] = None
    output_video: Optional[str] = None
    offline: Optional[bool] = None
    api_key: Optional[str] = None
    model_name: Optional[str] = None
    fallback_model_name: Optional[str] = None


def load_config(path: str) -> AppConfig:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return AppConfig(**data)
