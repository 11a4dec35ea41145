from __future__ import annotations

from fastapi import Request

from trivia.content.registry import ContentRepository


def get_content(request: Request) -> ContentRepository:
    content = getattr(request.app.state, "content", None)
    if content is None:
        raise RuntimeError("Content not initialized. Build a ContentRepository at startup.")
    return content
