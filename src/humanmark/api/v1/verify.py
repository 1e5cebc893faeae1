"""HumanMark - Verification API endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, File, Header, HTTPException, Request, UploadFile
from pydantic import BaseModel, Field, field_validator, model_validator

from humanmark.models.schemas import AnalysisInput, DetectionVerdict

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 10


def _fail(status_code: int, message: str, code: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"error": message, "code": code})


async def require_api_key(request: Request, x_api_key: str | None = Header(None)) -> None:
    settings = request.app.state.settings
    if settings.api_key_required and x_api_key != settings.api_key:
        raise _fail(401, "invalid or missing API key", "unauthorized")


router = APIRouter(prefix="/verify", tags=["Verify"], dependencies=[Depends(require_api_key)])


class VerifyRequest(BaseModel):
    """Verify text directly or content referenced by URL."""

    text: str | None = None
    url: str | None = None
    content_type: str | None = Field(None, description="Category name or MIME hint")

    @field_validator("text")
    @classmethod
    def _check_text(cls, v: str | None) -> str | None:
        if v is not None and len(v.strip()) < MIN_TEXT_LENGTH:
            raise ValueError(f"text must be at least {MIN_TEXT_LENGTH} characters")
        return v

    @field_validator("url")
    @classmethod
    def _check_url(cls, v: str | None) -> str | None:
        if v is not None and not v.lower().startswith(("http://", "https://")):
            raise ValueError("url must be an absolute http(s) URL")
        return v

    @model_validator(mode="after")
    def _require_content(self) -> VerifyRequest:
        if not self.text and not self.url:
            raise ValueError("either text or url is required")
        return self


@router.post("")
async def verify(body: VerifyRequest, request: Request, detailed: bool = False) -> dict[str, Any]:
    """Analyze text, or fetch and analyze the content at a URL."""
    state = request.app.state
    if body.text:
        inp = AnalysisInput(text=body.text, url=body.url, content_type=body.content_type)
    else:
        fetched = await state.fetcher.fetch(body.url)
        inp = AnalysisInput(
            data=fetched.data,
            url=fetched.url,
            mime_type=fetched.mime_type,
            content_type=body.content_type,
        )
    verdict = await state.orchestrator.analyze(inp)
    return verdict.to_response(detailed=detailed)


@router.post("/upload")
async def verify_upload(request: Request, file: UploadFile = File(...), detailed: bool = False) -> dict[str, Any]:
    """Analyze an uploaded file."""
    max_size = request.app.state.settings.max_upload_size
    data = await file.read(max_size + 1)
    if not data:
        raise _fail(400, "uploaded file is empty", "no_content")
    if len(data) > max_size:
        raise _fail(413, f"file exceeds maximum upload size of {max_size} bytes", "file_too_large")

    inp = AnalysisInput.from_bytes(data, filename=file.filename, mime_type=file.content_type)
    verdict = await request.app.state.orchestrator.analyze(inp)
    return verdict.to_response(detailed=detailed)


@router.get("/{result_id}")
async def get_result(result_id: str, request: Request, detailed: bool = True) -> dict[str, Any]:
    """Fetch a previously stored verdict."""
    record = await request.app.state.store.get(result_id)
    if record is None:
        raise _fail(404, "result not found or expired", "not_found")
    return DetectionVerdict.model_validate(record).to_response(detailed=detailed)
