"""Result returned by every mutation operation."""

from typing import Any, Literal, Optional

from pydantic import BaseModel

ErrorCode = Literal["validation", "not_found", "failed"]


class ActionState(BaseModel):
    message: Optional[str] = None
    error: Optional[str] = None
    errors: Optional[dict[str, list[str]]] = None
    code: Optional[ErrorCode] = None
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.code is None
