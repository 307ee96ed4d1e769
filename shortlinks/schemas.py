from datetime import datetime

from pydantic import BaseModel, ConfigDict


class LinkCreate(BaseModel):
    target_url: str | None = None
    code: str | None = None

class LinkOut(BaseModel):
    code: str
    target_url: str
    total_clicks: int
    last_clicked: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class DeleteOut(BaseModel):
    success: bool

class HealthOut(BaseModel):
    ok: bool
    version: str
    uptime: float

class ErrorOut(BaseModel):
    detail: str
