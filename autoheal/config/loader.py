from __future__ import annotations

import json
from pathlib import Path

from autoheal.config.schema import AutoHealConfig


class ConfigLoader:
    """Loads and validates the JSON framework configuration."""

    @staticmethod
    def load(path: str | Path) -> AutoHealConfig:
        config_path = Path(path)
        with config_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        return AutoHealConfig.model_validate(payload)

    @staticmethod
    def load_or_default(path: str | Path) -> AutoHealConfig:
        config_path = Path(path)
        if not config_path.exists():
            return AutoHealConfig()
        return ConfigLoader.load(config_path)
