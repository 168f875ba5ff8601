from fastapi import Request

from spruce.app.db.store import EntityStore


def get_store(request: Request) -> EntityStore:
    """The store created at application startup."""
    return request.app.state.store
