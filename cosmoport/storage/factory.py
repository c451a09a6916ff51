"""
Storage factory for creating ship storage backends.

This module provides factory functions to instantiate the storage backend
selected in configuration and to hold the process-wide instance.
"""

from typing import Callable, Dict, Optional
import logging

from cosmoport.storage.base import ShipStorage

logger = logging.getLogger(__name__)

# Storage registry mapping backend name to backend class factory
_STORAGE_REGISTRY: Dict[str, Callable[[], ShipStorage]] = {}


def _get_storage_registry() -> Dict[str, Callable[[], ShipStorage]]:
    """Lazily populate and return the storage registry."""
    if not _STORAGE_REGISTRY:
        from cosmoport.storage.memory import MemoryStorage
        from cosmoport.storage.sql import SQLStorage

        _STORAGE_REGISTRY.update(
            {
                "memory": MemoryStorage,
                "sql": SQLStorage,
            }
        )
    return _STORAGE_REGISTRY


# Global storage instance
_storage: Optional[ShipStorage] = None


def create_storage(backend: str) -> ShipStorage:
    """
    Create a storage backend instance.

    Args:
        backend: One of:
            - "sql": SQLModel tables on the configured database URL
            - "memory": in-process dict, useful for tests and demos

    Returns:
        A ShipStorage instance

    Raises:
        ValueError: If the backend is not supported.
    """
    registry = _get_storage_registry()

    if backend in registry:
        return registry[backend]()

    raise ValueError(
        f"Unknown storage backend: {backend}. "
        "Supported backends: " + ", ".join(sorted(registry))
    )


def set_storage(storage: ShipStorage) -> None:
    """Explicitly set the global storage instance."""
    global _storage
    _storage = storage


def get_storage() -> ShipStorage:
    """
    Get the global storage instance.

    Raises:
        RuntimeError: If storage has not been initialized
    """
    if _storage is None:
        raise RuntimeError(
            "Storage not initialized. Call initialize_storage() first."
        )
    return _storage


async def initialize_storage(backend: str) -> ShipStorage:
    """Create, initialize and register the global storage backend."""
    storage = create_storage(backend)
    await storage.initialize()
    set_storage(storage)
    logger.info("Storage initialized: %s", backend)
    return storage


async def close_storage() -> None:
    """Close the global storage backend."""
    global _storage
    if _storage is not None:
        await _storage.close()
        _storage = None
        logger.info("Storage closed")
