"""Errors raised by the entity store and caught by the service layer."""

from typing import Iterable


class SpruceError(Exception):
    """Base class for domain errors."""


class NotFoundError(SpruceError):
    def __init__(self, entity: str, ids: Iterable[str]):
        self.entity = entity
        self.ids = list(ids)
        if len(self.ids) == 1:
            message = f"{entity} not found."
        else:
            message = f"{entity}s not found: {', '.join(self.ids)}."
        super().__init__(message)
