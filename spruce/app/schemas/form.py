"""Shared pieces for request schemas built from flat form-style maps."""

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic_core import PydanticCustomError


class FormModel(BaseModel):
    """Base request schema. Blank values in the incoming map count as missing."""

    model_config = ConfigDict(str_strip_whitespace=True)

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data):
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value is not None and value != ""}
        return data


def require_min_length(value: str, length: int, message: str) -> str:
    if len(value) < length:
        raise PydanticCustomError("too_short", message)
    return value
