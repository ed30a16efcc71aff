"""Pydantic response models for the HTTP surface."""

from typing import List, Optional

from pydantic import BaseModel


class TempoResponse(BaseModel):
    path: str
    bpm: float
    raw_bpm: float
    peak_count: int
    sample_rate: int
    frames: int
    channels: int
    duration_sec: float


class FileOutcome(BaseModel):
    path: str
    ok: bool
    bpm: Optional[float] = None
    error: Optional[str] = None


class ScanResponse(BaseModel):
    directory: str
    total: int
    failed: int
    found: List[str]
    results: List[FileOutcome]
