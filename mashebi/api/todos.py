"""Todo CRUD endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from mashebi.core.config import settings
from mashebi.core.database import get_db
from mashebi.schemas.todo import TodoCreate, TodoRead, TodoUpdate
from mashebi.services.todos import (
    TodoValidationError,
    create_todo,
    delete_todo,
    list_todos,
    update_todo,
)

router = APIRouter()


@router.get("", response_model=list[TodoRead])
def get_todos(db: Annotated[Session, Depends(get_db)]) -> list[TodoRead]:
    """Up to 200 todos, newest first."""
    return [TodoRead.model_validate(t) for t in list_todos(db)]


@router.post("", response_model=TodoRead, status_code=status.HTTP_201_CREATED)
def post_todo(
    body: TodoCreate,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> TodoRead:
    try:
        todo = create_todo(db, body.title)
    except TodoValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message) from e
    response.headers["Location"] = f"{settings.API_PREFIX}/todos/{todo.id}"
    return TodoRead.model_validate(todo)


@router.put("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
def put_todo(
    todo_id: int,
    body: TodoUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Partial update: only fields present in the body change."""
    try:
        found = update_todo(db, todo_id, title=body.title, is_done=body.is_done)
    except TodoValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message) from e
    if not found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_todo(todo_id: int, db: Annotated[Session, Depends(get_db)]) -> Response:
    if not delete_todo(db, todo_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
