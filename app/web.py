from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from services.relay import RelayService, build_default_relay


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

REFRESH_SECONDS = 5


def get_relay() -> RelayService:
    return build_default_relay()


router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
async def ui_index(
    request: Request,
    relay: RelayService = Depends(get_relay),
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {
            "reading": relay.store.get(),
            "device_id": relay.device_id,
            "refresh_seconds": REFRESH_SECONDS,
        },
    )
