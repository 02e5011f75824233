"""
Ports (interfaces) for item content.

These define the contract that catalog adapters must implement.
The scheduler and coordinator depend on this abstraction, not on a word list format.
"""

from abc import ABC, abstractmethod
from collections.abc import Set

from .models import ItemMeta


class ItemCatalog(ABC):
    """
    Port for ranked vocabulary content.

    Implementations:
        - FileItemCatalog: Loads a JSON or YAML word list from disk.
        - InMemoryItemCatalog: Wraps an already-built list of ItemMeta.
    """

    @abstractmethod
    def list_unlearned_ranked(self, exclude_ids: Set[str], limit: int) -> list[ItemMeta]:
        """
        Return up to `limit` items in catalog order, skipping `exclude_ids`.

        Args:
            exclude_ids: Ids the learner already has a record for.
            limit: Maximum number of items to return.

        Returns:
            Items ordered from most to least valuable to learn next.
        """
        pass

    @abstractmethod
    def get_meta(self, item_id: str) -> ItemMeta | None:
        """
        Look up static metadata for one item.

        Returns:
            The item's metadata, or None if the catalog does not know the id.
        """
        pass
