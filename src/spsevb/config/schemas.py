from __future__ import annotations
import math
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional, Tuple

class RunCfg(BaseModel):
    """
    Global run controls.
    """

    # Diagnostics
    diagnostics_level: int = 1  # 0=off, 1=minimal, 2=verbose

    # Limits
    max_events: Optional[int] = None
    # Rows per private builder before merging; None builds in one pass
    chunk_events: Optional[int] = None

    @field_validator("diagnostics_level")
    def _diag_range(cls, v: int) -> int:
        if v not in (0, 1, 2):
            raise ValueError("diagnostics_level must be 0, 1, or 2")
        return v

    @field_validator("max_events", "chunk_events")
    def _positive(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("must be a positive integer")
        return v

class IOCfg(BaseModel):
    """
    I/O paths and hit-list source description.

    TOML:

    [io]
    input_path  = "run_42_hits.parquet"
    output_path = "run_42_sps.h5"

    [io.adapter]
    type = "table"
    time_units = "ps"
    """

    input_path: str
    output_path: str

    # Adapter-specific sub-config, e.g. [io.adapter]
    adapter: Dict[str, Any] = Field(default_factory=dict)

class ChannelEntryCfg(BaseModel):
    board: int
    channel: int
    channel_type: str

class ChannelMapCfg(BaseModel):
    """
    Which digitizer channel plays which detector role.

    TOML:

    [channel_map]
    path = "etc/ChannelMap.txt"     # optional map file
    entries = [                     # optional inline entries, override the file
        { board = 0, channel = 0, channel_type = "AnodeFront" },
    ]
    """

    path: Optional[str] = None
    entries: List[ChannelEntryCfg] = []

class FocalPlaneCfg(BaseModel):
    # Xavg = w0*X1 + w1*X2; omit to leave Xavg unset
    weights: Optional[Tuple[float, float]] = None

    @field_validator("weights")
    def _finite(cls, v):
        if v is not None and not all(math.isfinite(w) for w in v):
            raise ValueError("focal_plane.weights must be finite")
        return v

class VisCfg(BaseModel):
    export_png_on_write: bool = False
    column: str = "Xavg"
    bins: int = 600


class Config(BaseModel):
    """
    Top-level TOML configuration.
    """

    run: RunCfg = Field(default_factory=RunCfg)
    io: IOCfg
    channel_map: ChannelMapCfg = Field(default_factory=ChannelMapCfg)
    focal_plane: FocalPlaneCfg = Field(default_factory=FocalPlaneCfg)
    vis: VisCfg = Field(default_factory=VisCfg)
