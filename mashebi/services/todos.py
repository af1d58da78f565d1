"""Todo CRUD over the todos table."""

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from mashebi.models import Todo
from mashebi.models.todo import TITLE_MAX_LEN

LIST_LIMIT = 200


class TodoValidationError(Exception):
    """Raised when a todo title is too long."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _clean_title(title: str | None) -> str:
    cleaned = (title or "").strip()
    if len(cleaned) > TITLE_MAX_LEN:
        raise TodoValidationError(f"Title must be at most {TITLE_MAX_LEN} characters.")
    return cleaned


def list_todos(db: Session, limit: int = LIST_LIMIT) -> list[Todo]:
    """Newest todos first (by id), at most limit."""
    return db.query(Todo).order_by(Todo.id.desc()).limit(limit).all()


def create_todo(db: Session, title: str | None) -> Todo:
    todo = Todo(
        title=_clean_title(title),
        is_done=False,
        created_at=datetime.now(timezone.utc),
    )
    db.add(todo)
    db.commit()
    db.refresh(todo)
    return todo


def update_todo(
    db: Session,
    todo_id: int,
    title: str | None = None,
    is_done: bool | None = None,
) -> bool:
    """Apply only the supplied fields. Returns False if the todo does not exist."""
    todo = db.get(Todo, todo_id)
    if todo is None:
        return False
    if title is not None:
        todo.title = _clean_title(title)
    if is_done is not None:
        todo.is_done = is_done
    db.commit()
    return True


def delete_todo(db: Session, todo_id: int) -> bool:
    """Delete one todo. Returns False if it does not exist."""
    todo = db.get(Todo, todo_id)
    if todo is None:
        return False
    db.delete(todo)
    db.commit()
    return True
