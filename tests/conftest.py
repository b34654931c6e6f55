# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from fieldmis.logging.init import reset_logging

BASELINE_CSV = """Farmer ID,HH Head Name,Cluster,GP,Village,Category
007,Asha,North,GP1,V1,ST
008,Ravi,South,GP2,V2,SC
"""

CONTRIBUTIONS_CSV = """Timestamp,Farmer ID,BYP-NS (Rs),GOAT SHED
12/03/2024,7,150,0
13/03/2024,8,,250
14/03/2024,99,500,500
"""


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers bind sys.stdout at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """feeds:
  baseline: https://example.test/baseline.csv
  contributions: https://example.test/contributions.csv
  attendance: https://example.test/attendance.csv
apps_script_url: https://script.example.test/exec
http:
  timeout_seconds: 5
  max_workers: 2
csv:
  strict: false
logs_dir: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "fieldmis.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def _response(text: str | None = None, status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.content = (text or "").encode("utf-8")
    if resp.ok:
        resp.raise_for_status.return_value = None
    else:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Client Error")
    return resp


@pytest.fixture()
def make_session():
    """Build a fake requests session.

    ``routes`` maps a URL prefix to CSV text, an int status code, or an
    exception instance raised by ``get``.
    """
    def factory(routes: dict[str, object]) -> MagicMock:
        def get(url, timeout=None, headers=None):
            for prefix, outcome in routes.items():
                if url.startswith(prefix):
                    if isinstance(outcome, Exception):
                        raise outcome
                    if isinstance(outcome, int):
                        return _response(status=outcome)
                    return _response(str(outcome))
            return _response(status=404)

        session = MagicMock()
        session.get.side_effect = get
        return session

    return factory


@pytest.fixture()
def baseline_csv() -> str:
    return BASELINE_CSV


@pytest.fixture()
def contributions_csv() -> str:
    return CONTRIBUTIONS_CSV
