"""
Department and reporter directory backends.
"""

import logging

from civic_triage.core.settings import settings
from civic_triage.directory.base import Directory
from civic_triage.directory.memory import InMemoryDirectory

logger = logging.getLogger(__name__)


def create_directory() -> Directory:
    if settings.USE_MOCK_DB:
        logger.info("[DIRECTORY] Using in-memory directory")
        return InMemoryDirectory()

    from civic_triage.directory.firestore_directory import FirestoreDirectory
    logger.info("[DIRECTORY] Using Firestore directory")
    return FirestoreDirectory()


__all__ = ["Directory", "InMemoryDirectory", "create_directory"]
