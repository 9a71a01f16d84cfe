"""Upload slot schemas."""

from pydantic import BaseModel, Field


class UploadSlotRequest(BaseModel):
    file_name: str = Field(min_length=1, max_length=512)
    file_size: int = Field(gt=0)
    content_type: str | None = None


class UploadSlot(BaseModel):
    signed_url: str
    token: str | None = None
    storage_path: str
    file_name: str
