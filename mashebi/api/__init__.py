"""API routes mounted under API_PREFIX."""

from fastapi import APIRouter

from mashebi.api import auth, todos

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(todos.router, prefix="/todos", tags=["todos"])
