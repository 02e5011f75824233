"""
Service Factory
Centralizes the wiring of catalog, store and coordinator from a config.
"""

import logging

from lexipace.application.config import SchedulerConfig
from lexipace.application.session.coordinator import SessionCoordinator
from lexipace.domain.learning.ports import ItemCatalog
from lexipace.infrastructure.catalog.file_catalog import FileItemCatalog, InMemoryItemCatalog
from lexipace.infrastructure.persistence.json_store import JsonLearnerStore

logger = logging.getLogger(__name__)


def get_catalog(config: SchedulerConfig) -> ItemCatalog:
    """
    Returns the catalog named by config.catalog_path.

    Without a word list, new-item recommendations are simply empty.
    """
    if config.catalog_path is None:
        logger.warning("No catalog_path configured; new items cannot be recommended")
        return InMemoryItemCatalog([])
    return FileItemCatalog(config.catalog_path)


def get_store(config: SchedulerConfig) -> JsonLearnerStore:
    return JsonLearnerStore(config.data_dir)


def get_coordinator(config: SchedulerConfig, catalog: ItemCatalog | None = None) -> SessionCoordinator:
    if catalog is None:
        catalog = get_catalog(config)
    return SessionCoordinator(catalog, config=config)
