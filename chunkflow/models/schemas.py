# chunkflow/models/schemas.py
from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from typing import Any, Literal, Mapping, Optional
import re

from chunkflow.core.errors import DescriptorError

_INT_RX = re.compile(r"[+-]?[0-9]+")

# flow.js wire name -> label used in "Bad <label>" errors
_FORM_FIELDS = {
    "flowChunkNumber": "ChunkNumber",
    "flowTotalChunks": "TotalChunks",
    "flowChunkSize": "ChunkSize",
    "flowTotalSize": "TotalSize",
    "flowIdentifier": "Identifier",
    "flowFilename": "Filename",
    "flowRelativePath": "RelativePath",
}

class UploadDescriptor(BaseModel):
    """
    Per-request metadata sent by flow.js / ng-flow alongside every chunk.
    Chunk numbering is 1-based; the final chunk may be up to 2x chunk_size.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    chunk_number: int = Field(..., alias="flowChunkNumber", ge=1)
    total_chunks: int = Field(..., alias="flowTotalChunks", ge=1)
    chunk_size: int = Field(..., alias="flowChunkSize", gt=0)
    total_size: int = Field(..., alias="flowTotalSize", ge=0)
    identifier: str = Field(..., alias="flowIdentifier", min_length=1)
    filename: str = Field(..., alias="flowFilename", min_length=1)
    # accepted for protocol completeness, storage ignores it
    relative_path: str = Field(..., alias="flowRelativePath", min_length=1)

    @field_validator("chunk_number", "total_chunks", "chunk_size", "total_size", mode="before")
    @classmethod
    def _plain_integer(cls, v: Any) -> Any:
        # sign and ASCII digits only: no "1.0", " 2 " or "1_0"
        if isinstance(v, str):
            if not _INT_RX.fullmatch(v):
                raise ValueError("must be a base-10 integer")
            return int(v)
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError("must be a base-10 integer")
        return v

    @field_validator("identifier", "filename")
    @classmethod
    def _single_path_segment(cls, v: str) -> str:
        # used verbatim as a directory / file name under the upload root
        if v in (".", "..") or any(c in v for c in ("/", "\\", "\x00")):
            raise ValueError("must be a single path segment")
        return v

    @property
    def is_final_chunk(self) -> bool:
        return self.chunk_number == self.total_chunks

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "UploadDescriptor":
        data = {k: form[k] for k in _FORM_FIELDS if k in form}
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            field = first["loc"][0] if first["loc"] else ""
            label = _FORM_FIELDS.get(str(field), str(field))
            raise DescriptorError(f"Bad {label}") from e

class ChunkUploadOut(BaseModel):
    status: Literal["incomplete", "complete"]
    identifier: str
    chunk_number: int
    path: Optional[str] = None
