import asyncio
import copy
import logging

from typing import Awaitable, Callable, Dict, Generic, TypeVar

from relay.core.cache.errors import EntityLookupError, MissingEntryError

T = TypeVar("T")

class EntityCache(Generic[T]):
    """Read-through cache for one kind of entity (channel, user or guild)

    Failed lookups are never stored, so an unknown ID hits the provider
    again on every call.
    """

    def __init__(self, kind: str, fetch: Callable[[str], Awaitable[T]]):
        """Initialize the EntityCache

        Args:
            kind: Entity kind, used in errors and logs
            fetch: Coroutine function returning the entity for an ID
        """
        self.kind = kind
        self.fetch = fetch
        self.entities: Dict[str, T] = {}  # entity_id -> entity
        self._lock = asyncio.Lock()

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self.entities

    def __len__(self) -> int:
        return len(self.entities)

    async def get(self, entity_id: str) -> T:
        """Get an entity, fetching it from the provider on a miss

        Args:
            entity_id: Entity ID

        Returns:
            Copy of the cached entity

        Raises:
            EntityLookupError: If the provider failed
        """
        async with self._lock:
            if entity_id in self.entities:
                return copy.copy(self.entities[entity_id])

        try:
            entity = await self.fetch(entity_id)
        except Exception as e:
            raise EntityLookupError(self.kind, entity_id, e) from e

        async with self._lock:
            self.entities[entity_id] = copy.copy(entity)

        logging.debug(f"Cached {self.kind} {entity_id}")
        return copy.copy(entity)

    async def invalidate(self, entity_id: str) -> None:
        """Remove an entity from the cache

        Args:
            entity_id: Entity ID

        Raises:
            MissingEntryError: If the entity was not cached
        """
        async with self._lock:
            if entity_id not in self.entities:
                raise MissingEntryError(self.kind, entity_id)

            del self.entities[entity_id]

        logging.debug(f"Invalidated {self.kind} {entity_id}")
