import sys
from pathlib import Path

# Ensure the project root is on sys.path so `eqreduce` and `backend` are importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from eqreduce import settings as settings_module


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path: Path) -> Path:
    """Keep every test away from the real ``data/eqreduce.json``."""
    data_dir = tmp_path / "data"
    data_file = data_dir / "eqreduce.json"
    monkeypatch.setattr(settings_module, "_DATA_DIR", str(data_dir))
    monkeypatch.setattr(settings_module, "_DATA_FILE", str(data_file))
    return data_file
