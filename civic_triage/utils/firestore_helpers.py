"""
Firestore query helpers.

NOTE: positional where() arguments still work with firebase_admin; the
deprecation warning does not affect functionality.
"""

from civic_triage.core.errors import StorageError


def where_filter(query, field_path: str, op_string: str, value):
    """
    Usage:
        query = where_filter(collection, "category", "==", "waste")
        query = where_filter(query, "status", "in", ["pending", "in_progress"])
    """
    return query.where(field_path, op_string, value)


def client_or_storage_error(get_client):
    """Resolve a Firestore client, reporting initialization failure as StorageError."""
    try:
        return get_client()
    except RuntimeError as e:
        raise StorageError(f"Firestore unavailable: {e}") from e
