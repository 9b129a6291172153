# src/spsevb/table/diagnostics.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from spsevb.config.channel_map import SPSChannelType

_FOCAL_PLANE_ROLES = frozenset({
    SPSChannelType.DelayFrontLeft,
    SPSChannelType.DelayFrontRight,
    SPSChannelType.DelayBackLeft,
    SPSChannelType.DelayBackRight,
})


@dataclass
class BuildDiagnostics:
    """Per-run tallies; informational only, never used to alter rows."""
    total_events: int = 0
    empty_events: int = 0
    total_hits: int = 0
    unmapped_hits: int = 0
    duplicate_role_hits: int = 0
    focal_plane_events: int = 0
    role_counts: Dict[str, int] = field(default_factory=dict)

    def tally_roles(self, roles: Sequence[Optional[SPSChannelType]]) -> None:
        """Count one event from the roles its hits resolved to (None = unmapped)."""
        self.total_events += 1
        self.total_hits += len(roles)
        if not roles:
            self.empty_events += 1
        seen = set()
        for role in roles:
            if role is None:
                self.unmapped_hits += 1
                continue
            if role in seen:
                self.duplicate_role_hits += 1
            seen.add(role)
            self.role_counts[role.value] = self.role_counts.get(role.value, 0) + 1
        if _FOCAL_PLANE_ROLES <= seen:
            self.focal_plane_events += 1
