"""Storage infrastructure module.

Provides session-scoped evidence storage via the StorageProvider interface.
"""

from incident_report_service.infrastructure.storage.provider import StorageError, StorageProvider
from incident_report_service.infrastructure.storage.local_storage import LocalStorage

__all__ = [
    "StorageError",
    "StorageProvider",
    "LocalStorage",
]
