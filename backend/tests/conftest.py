import sys
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture()
def db_url(tmp_path, monkeypatch):
    # Fresh file per test so AUTOINCREMENT ids start at 1
    url = f"sqlite:///{tmp_path / 'users_test.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    return url


@pytest.fixture()
def engine(db_url):
    from backend.db import init_engine
    e = init_engine(db_url)
    yield e
    e.dispose()


@pytest.fixture()
def client(db_url):
    # Import app after DATABASE_URL is set; lifespan opens the pool on enter
    from backend.api import app
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c
