"""
quickask.api.responses — Response envelope
===========================================

Every endpoint answers ``{"code": 200, "message"?: str, "data"?: {...}}``;
errors answer ``{"code": <status>, "message": <text>}`` with the same HTTP
status.
"""

from __future__ import annotations

from fastapi.responses import JSONResponse


def ok(data: dict | None = None, message: str | None = None) -> dict:
    body: dict = {"code": 200}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body


def error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"code": status_code, "message": message},
    )
