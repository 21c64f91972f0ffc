from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class HealingSettings(BaseModel):
    enabled: bool = True
    max_retry_attempts: int = Field(default=3, ge=0)
    text_mode: str = "aggregated"

    @field_validator("text_mode")
    @classmethod
    def validate_text_mode(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in {"aggregated", "own"}:
            raise ValueError("text_mode must be 'aggregated' or 'own'")
        return normalized


class PageLoadSettings(BaseModel):
    tracking_enabled: bool = True
    default_timeout_ms: int = Field(default=30000, gt=0)
    min_implicit_wait_ms: int = Field(default=10000, ge=0)
    min_explicit_wait_seconds: int = Field(default=10, ge=0)
    explicit_wait_buffer_seconds: int = Field(default=5, ge=0)


class EnvironmentConfig(BaseModel):
    base_url: str = ""
    browser: str = "chrome"
    headless: bool = False
    window_size: str = "1440,1200"
    page_load_timeout_seconds: int = Field(default=30, gt=0)

    @field_validator("browser")
    @classmethod
    def validate_browser(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in {"chrome", "firefox"}:
            raise ValueError(f"Unsupported browser: {value}")
        return normalized


class ReportSettings(BaseModel):
    artifacts_root: str = "artifacts"
    report_title: str = "AutoHeal Test Report"


class AutoHealConfig(BaseModel):
    healing: HealingSettings = Field(default_factory=HealingSettings)
    page_load: PageLoadSettings = Field(default_factory=PageLoadSettings)
    environment: EnvironmentConfig = Field(default_factory=EnvironmentConfig)
    reporting: ReportSettings = Field(default_factory=ReportSettings)
