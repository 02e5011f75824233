import os

import pytest

from lexipace.application.config import SchedulerConfig
from lexipace.application.scheduler.review_scheduler import ReviewScheduler
from lexipace.application.session.coordinator import SessionCoordinator
from lexipace.domain.learning.models import ItemMeta
from lexipace.infrastructure.catalog.file_catalog import InMemoryItemCatalog


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keeps user config files and LEXIPACE_* variables out of tests."""
    monkeypatch.setattr("lexipace.application.config.CONFIG_FILES", [])
    for key in list(os.environ):
        if key.startswith("LEXIPACE_"):
            monkeypatch.delenv(key)


@pytest.fixture
def config():
    return SchedulerConfig()


@pytest.fixture
def scheduler(config):
    return ReviewScheduler(config)


@pytest.fixture
def catalog_items():
    return [
        ItemMeta(item_id=f"w{i:02d}", frequency=10_000_000 - i * 100_000, rank=i)
        for i in range(1, 13)
    ]


@pytest.fixture
def catalog(catalog_items):
    return InMemoryItemCatalog(catalog_items)


@pytest.fixture
def coordinator(catalog, config):
    return SessionCoordinator(catalog, config=config)


@pytest.fixture
def data_dir(tmp_path):
    """Creates a temporary directory for learner data."""
    d = tmp_path / "learner"
    d.mkdir()
    return d
