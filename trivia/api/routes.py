from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from trivia.actions import dispatch_turn
from trivia.api.deps import get_content
from trivia.api.models import TurnRequest, TurnResponse
from trivia.content.registry import ContentRepository, UnknownLocaleError

router = APIRouter()


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/turn", response_model=TurnResponse, response_model_by_alias=True)
def turn_route(payload: TurnRequest, content: ContentRepository = Depends(get_content)) -> TurnResponse:
    return dispatch_turn(payload, content=content)


@router.get("/locales")
async def locales_route(content: ContentRepository = Depends(get_content)) -> dict[str, list[str]]:
    return {"locales": list(content.locales)}


@router.get("/locales/{locale}/settings")
async def locale_settings_route(locale: str, content: ContentRepository = Depends(get_content)) -> dict:
    try:
        settings = content.load_settings(locale)
    except UnknownLocaleError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return settings.model_dump(by_alias=True)
