from __future__ import annotations

from fastapi import APIRouter

from dashboard.core.config import APP_NAME

router = APIRouter()


@router.get("/ping")
def ping() -> dict[str, str]:
    return {"message": "pong"}


@router.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/")
def root() -> dict[str, str]:
    return {"status": "ok", "message": f"{APP_NAME} is running"}
