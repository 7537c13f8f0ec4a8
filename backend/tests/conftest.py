import os

os.environ["READING_TELEMETRY_ENABLED"] = "0"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from config import DAY_MS, GuardConfig  # noqa: E402
from deps import get_generator  # noqa: E402
from generation import ReadingGenerator  # noqa: E402
from similarity_store import SimilarityStore  # noqa: E402
from symbol_catalog import DEFAULT_CULTURE_NOTES_PATH, DEFAULT_SYMBOLS_PATH, SymbolCatalog  # noqa: E402
from template_cooldown import TemplateCooldown  # noqa: E402

# 2026-03-14T12:00:00Z
T0 = 1773489600000


class FakeClock:
    def __init__(self, start: int = T0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms

    def advance_days(self, days: float) -> None:
        self.now += int(days * DAY_MS)


@pytest.fixture
def config():
    return GuardConfig()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def catalog():
    return SymbolCatalog.from_files(DEFAULT_SYMBOLS_PATH, DEFAULT_CULTURE_NOTES_PATH)


@pytest.fixture
def store(config):
    return SimilarityStore(config)


@pytest.fixture
def cooldown(config):
    return TemplateCooldown(config)


@pytest.fixture
def generator(catalog, store, cooldown, config, clock):
    return ReadingGenerator(catalog=catalog, store=store, cooldown=cooldown, config=config, clock=clock)


@pytest.fixture
def client(generator):
    from main import app

    app.dependency_overrides[get_generator] = lambda: generator
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
