# chunkflow/api/uploads.py
from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from starlette.datastructures import UploadFile
import asyncio
import logging

from chunkflow.core.errors import DescriptorError, UploadStorageError
from chunkflow.models.schemas import ChunkUploadOut, UploadDescriptor
from chunkflow.services.uploads import ChunkUploadService, get_upload_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])

def _descriptor(fields) -> UploadDescriptor:
    try:
        return UploadDescriptor.from_form(fields)
    except DescriptorError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.post("", response_model=ChunkUploadOut)
async def upload_chunk(
    request: Request,
    service: ChunkUploadService = Depends(get_upload_service),
):
    form = await request.form()
    descriptor = _descriptor(form)

    file = form.get("file")
    if not isinstance(file, UploadFile):
        raise HTTPException(status_code=400, detail="Can't access file field")

    # blocking filesystem work stays off the event loop
    try:
        path = await asyncio.to_thread(service.chunk_upload, descriptor, file.file)
    except UploadStorageError as e:
        logger.error("Chunk %s:%d failed: %s", descriptor.identifier, descriptor.chunk_number, e)
        raise HTTPException(status_code=500, detail=f"Unable to store chunk: {e}")

    return ChunkUploadOut(
        status="complete" if path else "incomplete",
        identifier=descriptor.identifier,
        chunk_number=descriptor.chunk_number,
        path=path,
    )

@router.get("", response_class=PlainTextResponse)
def get_chunk_status(
    request: Request,
    service: ChunkUploadService = Depends(get_upload_service),
):
    descriptor = _descriptor(request.query_params)
    message, code = service.chunk_status(descriptor)
    return PlainTextResponse(message, status_code=code)
