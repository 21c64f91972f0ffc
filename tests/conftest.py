from __future__ import annotations

from pathlib import Path

import pytest

from autoheal.config.loader import ConfigLoader
from autoheal.config.schema import AutoHealConfig
from autoheal.reporting.artifacts import ArtifactManager
from autoheal.reporting.report import RunReport
from tests.helpers import LOGIN_PAGE, FakeDriver, StaticPage


@pytest.fixture()
def suite_config() -> AutoHealConfig:
    config_path = Path(__file__).resolve().parents[1] / "config" / "autoheal.json"
    return ConfigLoader.load(config_path)


@pytest.fixture()
def fast_config() -> AutoHealConfig:
    return AutoHealConfig.model_validate(
        {
            "page_load": {
                "default_timeout_ms": 1,
                "min_explicit_wait_seconds": 0,
                "explicit_wait_buffer_seconds": 0,
            }
        }
    )


@pytest.fixture()
def login_page() -> StaticPage:
    return StaticPage(LOGIN_PAGE)


@pytest.fixture()
def fake_driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture()
def artifact_manager(tmp_path) -> ArtifactManager:
    return ArtifactManager(tmp_path / "artifacts")


@pytest.fixture()
def run_report(artifact_manager) -> RunReport:
    return RunReport(artifact_manager)
