from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FileRecord(SQLModel, table=True):
    __tablename__ = "files"

    id: Optional[int] = Field(default=None, primary_key=True)
    filename: str = Field(unique=True, index=True, nullable=False)
    size: int = Field(ge=0)
    file_type: Optional[str] = Field(default=None, nullable=True)
    file_path: str
    uploaded_at: datetime = Field(default_factory=_utc_now)
