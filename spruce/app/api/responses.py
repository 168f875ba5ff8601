"""Map operation results onto HTTP responses."""

from fastapi import HTTPException, status

from spruce.app.schemas.action import ActionState

STATUS_BY_CODE = {
    "validation": 422,
    "not_found": status.HTTP_404_NOT_FOUND,
    "failed": status.HTTP_400_BAD_REQUEST,
}


def unwrap(state: ActionState) -> ActionState:
    if state.ok:
        return state
    raise HTTPException(
        status_code=STATUS_BY_CODE.get(state.code, status.HTTP_400_BAD_REQUEST),
        detail=state.model_dump(exclude={"data"}, exclude_none=True),
    )
