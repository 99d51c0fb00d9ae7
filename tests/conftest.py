from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import fakeredis
import pytest
from fastapi.testclient import TestClient

from snakecalc.core.seeds import SequenceSeedSource


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs (PyCharm/CLI).

    In CI, we *don't* auto-load `.env`, so a developer's local REDIS_URL or log level
    never leaks into the build. Opt-in with: SNAKECALC_LOAD_DOTENV_FOR_TESTS=1
    """

    if os.environ.get("CI") and os.environ.get("SNAKECALC_LOAD_DOTENV_FOR_TESTS") != "1":
        return

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


def seed_for(x: int, y: int) -> int:
    """A seed whose first apple candidate is (x, y) when width and height divide 256."""

    return x + (y << 8)


@pytest.fixture()
def r() -> fakeredis.FakeRedis:
    # A private server per test so no state leaks between tests.
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture()
def seeds() -> SequenceSeedSource:
    # (0, 0) is never on the starting body for any legal board size.
    return SequenceSeedSource([seed_for(0, 0)])


@pytest.fixture()
def client_and_redis(
    r: fakeredis.FakeRedis, seeds: SequenceSeedSource
) -> Generator[tuple[TestClient, fakeredis.FakeRedis], None, None]:
    """FastAPI TestClient wired to fakeredis and the test's seed source."""

    from snakecalc.api.deps import get_redis, get_seed_source
    from snakecalc.main import app

    def _override() -> Generator[fakeredis.FakeRedis, None, None]:
        yield r

    app.dependency_overrides[get_redis] = _override
    app.dependency_overrides[get_seed_source] = lambda: seeds
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()
