from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

class RetryConfig(BaseModel):
    """Immutable retry budget; `timeout_ms` covers every attempt and delay combined."""
    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(ge=1)
    delay_ms: int = Field(default=0, ge=0)
    timeout_ms: int = Field(gt=0)

class LoadResult(BaseModel):
    success: bool
    total_jobs: int = 0

class JobCard(BaseModel):
    job_id: str
    title: str = 'Unknown'
    company_name: str = 'Unknown'
    location: Optional[str] = None
    url: Optional[str] = None
    collected_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator('title', 'company_name', mode='before')
    @classmethod
    def default_unknown(cls, v):
        if v is None:
            return 'Unknown'
        if isinstance(v, str):
            v = ' '.join(v.split())
            return v or 'Unknown'
        return v

    def __str__(self) -> str:
        return f"{self.title} at {self.company_name} ({self.location or 'n/a'})"
