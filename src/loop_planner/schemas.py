"""Loop import/export schemas (camelCase JSON, as exported by the player)."""

from datetime import datetime, timezone
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import Loop

EXPORT_FORMAT_VERSION = "1.0"


class LoopRecord(BaseModel):
    """One loop as stored in an export file."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    start_time: float = Field(alias="startTime", description="Start (seconds)")
    end_time: float = Field(alias="endTime", description="End (seconds)")
    color: Optional[str] = None
    playback_speed: Optional[float] = Field(default=None, alias="playbackSpeed")
    repeat_count: Optional[int] = Field(default=None, alias="repeatCount")
    play_count: int = Field(default=0, alias="playCount", ge=0)
    is_active: bool = Field(default=False, alias="isActive")

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def coerce_missing_time(cls, v: Any) -> Any:
        # Corrupt exports may carry null bounds; keep them as NaN so the
        # detector reports them instead of failing the whole import
        if v is None:
            return float("nan")
        return v

    def to_loop(self) -> Loop:
        return Loop(**self.model_dump())

    @classmethod
    def from_loop(cls, loop: Loop) -> "LoopRecord":
        return cls(**loop.to_dict())


class LoopExportData(BaseModel):
    """A loop collection export file."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = EXPORT_FORMAT_VERSION
    exported_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="exportedAt"
    )
    video_id: Optional[str] = Field(default=None, alias="videoId")
    video_title: Optional[str] = Field(default=None, alias="videoTitle")
    loops: List[LoopRecord] = Field(default_factory=list)

    def to_loops(self) -> List[Loop]:
        return [record.to_loop() for record in self.loops]

    @classmethod
    def from_loops(
        cls,
        loops: List[Loop],
        video_id: Optional[str] = None,
        video_title: Optional[str] = None,
    ) -> "LoopExportData":
        return cls(
            video_id=video_id,
            video_title=video_title,
            loops=[LoopRecord.from_loop(loop) for loop in loops],
        )


def parse_loop_payload(payload: Union[dict, list]) -> LoopExportData:
    """Accept either a full export object or a bare list of loops."""
    if isinstance(payload, list):
        return LoopExportData(loops=payload)
    return LoopExportData.model_validate(payload)
