# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pytest

from biocitizen.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def abundance_records() -> list[dict]:
    return [
        {"sp": "A", "n": "3"},
        {"sp": "A", "n": "2"},
        {"sp": "B", "n": "5"},
        {"sp": "", "n": "1"},
    ]


@pytest.fixture()
def presence_records() -> list[dict]:
    return [{"sp": "A"}, {"sp": "A"}, {"sp": "B"}]


@pytest.fixture()
def sample_config_yaml() -> str:
    return """strict_abundance: false
decimals: 4
null_sentinels: ["NA", "n/a"]
ai:
  model: test-model
  base_url: https://example.invalid/v1beta/
  timeout_seconds: 5
  retries: 0
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "biocitizen.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_csv(temp_workdir: Path):
    def _write(name: str, text: str) -> Path:
        f = temp_workdir / "data" / name
        f.write_text(text, encoding="utf-8")
        return f
    return _write


@pytest.fixture(autouse=True)
def _fresh_logging():
    # capsys swaps sys.stdout per test; rebuild the handler each time
    reset_logging()
    yield
    reset_logging()
