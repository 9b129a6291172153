# src/spsevb/table/sps_data.py
"""
Row builder for the SPS event table.

SPSData owns one growable float column per SPSDataField. Each call to
append_event adds exactly one row: every column is first extended with
INVALID_VALUE, then hits overwrite the new row by role, then the
focal-plane quantities are derived from the delay-line timestamps.

Between events every column holds exactly `rows` values, so columns can be
joined by position with no explicit key.
"""
from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from spsevb.config.channel_map import RoleLookup, SPSChannelType
from spsevb.physics.focal_plane import INVALID_VALUE, Weights, reconstruct_focal_plane
from spsevb.physics.hits import CompassHit
from spsevb.table.diagnostics import BuildDiagnostics
from spsevb.table.fields import SPSDataField

# role -> (energy, short, time) columns
ROLE_FIELDS: Dict[SPSChannelType, Tuple[SPSDataField, SPSDataField, SPSDataField]] = {
    role: (
        SPSDataField[f"{role.value}Energy"],
        SPSDataField[f"{role.value}Short"],
        SPSDataField[f"{role.value}Time"],
    )
    for role in SPSChannelType
}

_DELAY_ROLES = (
    SPSChannelType.DelayFrontLeft,
    SPSChannelType.DelayFrontRight,
    SPSChannelType.DelayBackLeft,
    SPSChannelType.DelayBackRight,
)


class SPSData:
    """
    Column store plus row builder.

    Duplicate roles inside one event resolve to the last hit in iteration
    order; callers that need a canonical result must order their hits.
    """

    def __init__(self) -> None:
        self.fields: Optional[Dict[SPSDataField, List[float]]] = {
            f: [] for f in SPSDataField.get_field_vec()
        }
        self.rows: int = 0

    # ------------------------------------------------------------------
    def _columns(self) -> Dict[SPSDataField, List[float]]:
        if self.fields is None:
            raise RuntimeError("SPSData has already been converted; build a new one.")
        return self.fields

    def push_defaults(self) -> None:
        """Pad every column that is one row short with INVALID_VALUE."""
        cols = self._columns()
        for field in SPSDataField.get_field_vec():
            col = cols[field]
            if len(col) < self.rows:
                col.append(INVALID_VALUE)
            if len(col) != self.rows:
                raise RuntimeError(
                    f"Column {field.column} has {len(col)} rows, expected {self.rows}"
                )

    def set_value(self, field: SPSDataField, value: float) -> None:
        """Overwrite the current row of one column."""
        cols = self._columns()
        if field not in cols:
            raise KeyError(f"{field!s} is not a column of this table")
        col = cols[field]
        if not col:
            raise RuntimeError(f"set_value({field!s}) called before any row was started")
        col[-1] = float(value)

    def append_event(
        self,
        event: Iterable[CompassHit],
        channel_map: RoleLookup,
        weights: Optional[Weights] = None,
        diagnostics: Optional[BuildDiagnostics] = None,
    ) -> None:
        """
        Add one row built from the hits of one event.

        Each hit is looked up once. Unmapped channels are skipped. Missing
        delay-line partners leave X1/X2/Theta/Xavg at INVALID_VALUE; so does
        weights=None for Xavg. The resolved roles are reported to
        `diagnostics` when given.
        """
        self._columns()
        self.rows += 1
        self.push_defaults()

        delay_times = {role: INVALID_VALUE for role in _DELAY_ROLES}
        roles: List[Optional[SPSChannelType]] = []

        for hit in event:
            role = channel_map.channel_type_for(hit.uuid)
            roles.append(role)
            if role is None:
                continue
            f_energy, f_short, f_time = ROLE_FIELDS[role]
            self.set_value(f_energy, hit.energy)
            self.set_value(f_short, hit.energy_short)
            self.set_value(f_time, hit.timestamp)
            if role in delay_times:
                delay_times[role] = hit.timestamp

        if diagnostics is not None:
            diagnostics.tally_roles(roles)

        fp = reconstruct_focal_plane(
            delay_times[SPSChannelType.DelayFrontLeft],
            delay_times[SPSChannelType.DelayFrontRight],
            delay_times[SPSChannelType.DelayBackLeft],
            delay_times[SPSChannelType.DelayBackRight],
            weights=weights,
        )
        if fp.x1 != INVALID_VALUE:
            self.set_value(SPSDataField.X1, fp.x1)
        if fp.x2 != INVALID_VALUE:
            self.set_value(SPSDataField.X2, fp.x2)
        if fp.complete:
            self.set_value(SPSDataField.Theta, fp.theta)
            self.set_value(SPSDataField.Xavg, fp.xavg)

    # ------------------------------------------------------------------
    def extend(self, other: "SPSData") -> None:
        """
        Append all rows of `other` after ours, preserving row order.

        `other` is consumed.
        """
        mine = self._columns()
        theirs = other._columns()
        for field in SPSDataField.get_field_vec():
            mine[field].extend(theirs[field])
        self.rows += other.rows
        other.fields = None

    def column(self, field: SPSDataField) -> np.ndarray:
        """Read-only copy of one column."""
        return np.asarray(self._columns()[field], dtype=np.float64)

    def into_columns(self) -> List[Tuple[str, np.ndarray]]:
        """
        Hand off the store as (column name, values) pairs in field order.

        The builder is unusable afterwards.
        """
        cols = self._columns()
        out = [
            (field.column, np.asarray(cols[field], dtype=np.float64))
            for field in SPSDataField.get_field_vec()
        ]
        self.fields = None
        return out

    def convert_to_frame(self) -> pd.DataFrame:
        pairs = self.into_columns()
        return pd.DataFrame(dict(pairs))


def concat_sps_data(parts: Sequence[SPSData]) -> SPSData:
    """Merge independently built chunks in the given order."""
    merged = SPSData()
    for part in parts:
        merged.extend(part)
    return merged
