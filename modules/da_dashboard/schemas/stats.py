"""
Statistics Schemas.

Response models for the public statistics feed and the per-principal KPIs.
Breakdown rows keep snake_case keys; envelope keys are camelCase, which is
what dashboard clients read.
"""

from pydantic import BaseModel, ConfigDict, Field


class SummaryStats(BaseModel):
    """Grand totals over every DA row."""

    model_config = ConfigDict(populate_by_name=True)

    total_das: int = Field(0, serialization_alias="totalDAs")
    total_data: int = Field(0, serialization_alias="totalData")
    total_reps: int = Field(0, serialization_alias="totalReps")
    active_das: int = Field(0, serialization_alias="activeDAs")
    inactive_das: int = Field(0, serialization_alias="inactiveDAs")
    pending_das: int = Field(0, serialization_alias="pendingDAs")
    avg_data_per_da: float = Field(0.0, serialization_alias="avgDataPerDA")


class RegionStat(BaseModel):
    region: str
    da_count: int
    total_data: int


class ZoneStat(BaseModel):
    zone: str
    da_count: int
    total_data: int


class StatusTrendItem(BaseModel):
    status: str | None = None
    count: int
    total_data: int


class TopDA(BaseModel):
    """A leading DA by data collected."""

    model_config = ConfigDict(from_attributes=True)

    name: str | None = None
    region: str | None = None
    zone: str | None = None
    woreda: str | None = None
    total_data_collected: int
    status: str | None = None
    reporting_manager_name: str | None = None


class PublicStatsResponse(BaseModel):
    """Unauthenticated aggregate feed for the public dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    stats: SummaryStats
    region_data: list[RegionStat] = Field(default_factory=list, serialization_alias="regionData")
    zone_data: list[ZoneStat] = Field(default_factory=list, serialization_alias="zoneData")
    status_trend: list[StatusTrendItem] = Field(default_factory=list, serialization_alias="statusTrend")
    top_das: list[TopDA] = Field(default_factory=list, serialization_alias="topDAs")
    poll_interval_seconds: int = Field(30, serialization_alias="pollIntervalSeconds")


class KPIResponse(BaseModel):
    """Totals for the caller's scope alongside whole-table totals."""

    model_config = ConfigDict(populate_by_name=True)

    rep_total_das: int = Field(0, serialization_alias="repTotalDAs")
    rep_total_data: int = Field(0, serialization_alias="repTotalData")
    global_total_das: int = Field(0, serialization_alias="globalTotalDAs")
    global_total_data: int = Field(0, serialization_alias="globalTotalData")
