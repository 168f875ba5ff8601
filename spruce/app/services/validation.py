"""Turn flat input maps into typed requests, or into a field -> messages map."""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)

FieldErrors = dict[str, list[str]]


def flatten_errors(exc: ValidationError) -> FieldErrors:
    errors: FieldErrors = {}
    for item in exc.errors():
        loc = item.get("loc") or ()
        if loc:
            field = str(loc[0])
        else:
            # model-level rules name the field they belong to in their context
            field = (item.get("ctx") or {}).get("field", "__root__")
        errors.setdefault(field, []).append(item["msg"])
    return errors


def validate_payload(schema: type[SchemaT], raw: Mapping[str, Any]) -> tuple[SchemaT | None, FieldErrors | None]:
    try:
        return schema.model_validate(dict(raw)), None
    except ValidationError as exc:
        return None, flatten_errors(exc)


def summarize_errors(errors: FieldErrors) -> str:
    return " ".join(message for messages in errors.values() for message in messages)
