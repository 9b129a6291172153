"""
spsevb.io.adapters

Readers that turn pre-parsed digitizer hit lists into events (lists of
spsevb.physics.hits.CompassHit) for the SPS event builder.

Design goals
------------
- Keep I/O concerns isolated from the row builder.
- Normalize units on ingest: times -> ns.
- Be tolerant to schema variants by using a small, explicit column map.
- Remain side-effect free: yield Python objects; HDF5 output is handled downstream.

Entry points
------------
- class HitTableAdapter: reads tabular hit lists (CSV/Parquet/HDF5).
- function make_adapter(cfg): factory from the [io.adapter] TOML section.

Config (example)
----------------
[io]
input_path = "data/run_42_hits.parquet"

[io.adapter]
type = "table"
time_units = "ps"             # "ns" | "ps"
hdf5_group = "hits"           # HDF5 only: group holding one dataset per column

[io.adapter.columns]          # rename source columns to canonical ones
event = "evt"
"""
from __future__ import annotations
from pathlib import Path
from typing import Dict, Iterator, List, Literal, Optional, Any

import h5py
import numpy as np
import pandas as pd

from spsevb.physics.hits import CompassHit, generate_board_channel_uuid

# canonical column -> default source column name
_DEFAULT_COLUMNS: Dict[str, str] = {
    "event": "event",
    "board": "board",
    "channel": "channel",
    "energy": "energy",
    "energy_short": "energy_short",
    "timestamp": "timestamp",
    "flags": "flags",
}
_REQUIRED = ("event", "board", "channel", "energy", "energy_short", "timestamp")

_TIME_SCALE = {"ns": 1.0, "ps": 0.001}


# ---------------------------------------------------------------------------
# Base adapter API
# ---------------------------------------------------------------------------

class BaseAdapter:
    """
    Abstract adapter interface.

    Yields one list of CompassHit per event, times in ns.
    """

    def iter_events(self, path: str) -> Iterator[List[CompassHit]]:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Table adapter
# ---------------------------------------------------------------------------

class HitTableAdapter(BaseAdapter):
    """
    Read one-hit-per-row tables.

    Supported inputs: CSV (.csv), Parquet (.parquet/.pq), HDF5 (.h5/.hdf5).

    Required columns (after renaming):
      - event         : event id; rows sharing it form one event
      - board, channel: digitizer address, combined into the channel uuid
      - energy, energy_short, timestamp
    Optional: flags.

    Events are emitted in order of first appearance of their id; hits keep
    their file order within an event, which decides duplicate-role ties.
    """

    def __init__(
        self,
        time_units: Literal["ns", "ps"] = "ns",
        columns: Optional[Dict[str, str]] = None,
        hdf5_group: str = "hits",
    ) -> None:
        if time_units not in _TIME_SCALE:
            raise ValueError(f"time_units must be 'ns' or 'ps', got {time_units!r}")
        self.time_scale = _TIME_SCALE[time_units]
        self.columns = dict(_DEFAULT_COLUMNS)
        self.columns.update(columns or {})
        self.hdf5_group = hdf5_group

    def _read_h5(self, p: Path) -> pd.DataFrame:
        with h5py.File(p, "r") as f:
            if self.hdf5_group not in f:
                raise KeyError(f"/{self.hdf5_group} not found in {p}")
            grp = f[self.hdf5_group]
            data = {name: np.asarray(grp[name]) for name in grp.keys()}
        return pd.DataFrame(data)

    def _read_table(self, path: str) -> pd.DataFrame:
        p = Path(path)
        suffix = p.suffix.lower()

        if suffix in {".csv"}:
            df = pd.read_csv(p)
        elif suffix in {".parquet", ".pq"}:
            df = pd.read_parquet(p)
        elif suffix in {".h5", ".hdf5"}:
            df = self._read_h5(p)
        else:
            raise ValueError(f"Unrecognized hit table: {p.name} (expected .csv/.parquet/.h5)")

        rename = {src: canon for canon, src in self.columns.items() if src in df.columns}
        df = df.rename(columns=rename)
        missing = [c for c in _REQUIRED if c not in df.columns]
        if missing:
            raise ValueError(f"{p.name} is missing required columns {missing}")
        if df["event"].isna().any():
            rows = df.index[df["event"].isna()].tolist()
            raise ValueError(f"{p.name} has hits without an event id at rows {rows[:10]}")
        return df

    def _rows_to_hits(self, df: pd.DataFrame) -> List[CompassHit]:
        has_flags = "flags" in df.columns
        hits: List[CompassHit] = []
        for r in df.itertuples(index=False):
            board, channel = int(r.board), int(r.channel)
            hits.append(CompassHit(
                uuid=generate_board_channel_uuid(board, channel),
                energy=float(r.energy),
                energy_short=float(r.energy_short),
                timestamp=float(r.timestamp) * self.time_scale,
                board=board,
                channel=channel,
                flags=int(r.flags) if has_flags else 0,
            ))
        return hits

    def iter_events(self, path: str) -> Iterator[List[CompassHit]]:
        df = self._read_table(path)
        for _, group in df.groupby("event", sort=False):
            yield self._rows_to_hits(group)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def make_adapter(cfg: Dict[str, Any]) -> BaseAdapter:
    """
    Create an adapter from a config dict (from TOML/CLI).

    Expected keys under [io.adapter]:
      type: "table"
      time_units: "ns" | "ps"
      columns: {canonical: source}
      hdf5_group: str
    """
    typ = (cfg.get("type") or "table").lower()

    if typ == "table":
        return HitTableAdapter(
            time_units=cfg.get("time_units", "ns"),
            columns=cfg.get("columns"),
            hdf5_group=cfg.get("hdf5_group", "hits"),
        )

    raise ValueError(f"Unknown adapter type: {typ}")
