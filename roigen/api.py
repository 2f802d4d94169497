"""FastAPI REST API for the Regions of Interest generator."""

import io
import logging
import re
import zipfile
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, HTTPException, Security
from fastapi.responses import StreamingResponse
from fastapi.security import APIKeyHeader
from pydantic import BaseModel

from roigen.config.settings import get_settings
from roigen.errors.exceptions import ManifestError, RegionsError, ValidationError
from roigen.services.generate_service import render_documents
from roigen.utils.guid import format_guid, new_guid
from roigen.utils.validator import build_request

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

UNSAFE_FILENAME_CHARS = re.compile(r'[^\x20-\x7e]|["\\]')


async def verify_api_key(key: Optional[str] = Security(api_key_header)):
    api_key = get_settings().api_key
    if not api_key:
        return
    if key != api_key:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")


app = FastAPI(
    title="Regions of Interest Generator API",
    description="REST API for generating trace-viewer Regions of Interest manifests.",
    version="1.0.0",
)


def _content_disposition(file_name: str) -> str:
    fallback = UNSAFE_FILENAME_CHARS.sub("_", file_name)
    encoded = quote(file_name, safe="")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


class HealthResponse(BaseModel):
    status: str
    timestamp: str


class RegionsBody(BaseModel):
    root_name: Any = None
    measures: Any = None
    providers: Optional[Any] = None


def _render(body: RegionsBody):
    root_guid = new_guid()
    try:
        request = build_request(body.root_name, body.measures, body.providers)
        return request, root_guid, render_documents(request, root_guid=root_guid)
    except (ValidationError, ManifestError) as exc:
        raise HTTPException(status_code=422, detail={"message": exc.message, **exc.details})
    except RegionsError as exc:
        raise HTTPException(status_code=500, detail=exc.message)


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="healthy", timestamp=datetime.now(timezone.utc).isoformat())


@app.get("/api/providers", dependencies=[Depends(verify_api_key)])
async def list_providers():
    records = get_settings().default_providers()
    return {"providers": records, "total": len(records)}


@app.post("/api/regions", dependencies=[Depends(verify_api_key)])
async def create_regions(body: RegionsBody):
    request, root_guid, rendered = _render(body)

    zip_buffer = io.BytesIO()
    with zipfile.ZipFile(zip_buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for doc in rendered:
            zf.writestr(doc.file_name, doc.content)
    zip_buffer.seek(0)

    logger.info(
        "api.regions root_name=%s root_guid=%s files=%d",
        request.root_name, format_guid(root_guid), len(rendered),
    )
    return StreamingResponse(
        zip_buffer,
        media_type="application/zip",
        headers={
            "Content-Disposition": _content_disposition(f"{request.root_name}.regions.zip"),
            "X-Root-Guid": format_guid(root_guid),
        },
    )


@app.post("/api/regions/preview", dependencies=[Depends(verify_api_key)])
async def preview_regions(body: RegionsBody):
    request, root_guid, rendered = _render(body)

    logger.info("api.preview root_name=%s files=%d", request.root_name, len(rendered))
    return {
        "root_name": request.root_name,
        "root_guid": format_guid(root_guid),
        "documents": {doc.file_name: doc.content.decode("utf-8") for doc in rendered},
    }
