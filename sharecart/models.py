from __future__ import annotations

from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .rules import U16_MAX

U16 = Annotated[int, Field(ge=0, le=U16_MAX)]


class Record(BaseModel):
    """
    One Sharecart save state.

    map_x/map_y accept any u16 but only the low 10 bits survive encoding.
    player_name is held as-is in memory; encode sanitizes it.
    """

    model_config = ConfigDict(validate_assignment=True)

    map_x: U16 = 0
    map_y: U16 = 0
    misc: List[U16] = Field(default_factory=lambda: [0] * 4, min_length=4, max_length=4)
    player_name: str = ""
    switch: List[bool] = Field(default_factory=lambda: [False] * 8, min_length=8, max_length=8)


class ReportSummary(BaseModel):
    warnings: int = 0
    defaulted_record: bool = False


class ReportItem(BaseModel):
    key: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class DecodeReport(BaseModel):
    summary: ReportSummary
    warnings: List[ReportItem] = Field(default_factory=list)


class DecodeResponse(BaseModel):
    record: Record
    report: DecodeReport


class NormalizedIni(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8")
    content: str


class NormalizeResponse(BaseModel):
    normalized_ini: NormalizedIni
    report: DecodeReport


class HealthResponse(BaseModel):
    ok: bool = True
