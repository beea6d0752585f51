"""CSV import models."""

from typing import Literal, Optional
from pydantic import BaseModel, Field


class ImportRow(BaseModel):
    """One parsed CSV line, before validation."""

    line_number: int = Field(description="1-based line number in the uploaded text")
    title: str = ""
    category: str = ""
    description: str = ""
    start_time: str = ""
    end_time: str = ""
    date: str = ""


class ImportRowResult(BaseModel):
    """Outcome of importing one row."""

    line_number: int
    title: str
    status: Literal["inserted", "skipped", "failed"]
    error: Optional[str] = None
    activity_id: Optional[str] = None


class ImportResult(BaseModel):
    """Ordered per-row results of one import batch."""

    results: list[ImportRowResult] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def inserted(self) -> int:
        return sum(1 for r in self.results if r.status == "inserted")

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.status == "skipped")

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.status == "failed")

    def to_response(self) -> dict:
        return {
            "total": self.total,
            "inserted": self.inserted,
            "skipped": self.skipped,
            "failed": self.failed,
            "results": [r.model_dump() for r in self.results],
        }
