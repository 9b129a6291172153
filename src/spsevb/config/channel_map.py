# src/spsevb/config/channel_map.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol

from spsevb.physics.hits import generate_board_channel_uuid

# Map-file token for a channel that is cabled but not routed to any column
UNUSED_TOKEN = "None"


class SPSChannelType(Enum):
    AnodeFront = "AnodeFront"
    AnodeBack = "AnodeBack"
    ScintLeft = "ScintLeft"
    ScintRight = "ScintRight"
    Cathode = "Cathode"
    DelayFrontLeft = "DelayFrontLeft"
    DelayFrontRight = "DelayFrontRight"
    DelayBackLeft = "DelayBackLeft"
    DelayBackRight = "DelayBackRight"
    Cebra0 = "Cebra0"
    Cebra1 = "Cebra1"
    Cebra2 = "Cebra2"
    Cebra3 = "Cebra3"
    Cebra4 = "Cebra4"
    Cebra5 = "Cebra5"
    Cebra6 = "Cebra6"

    @classmethod
    def parse(cls, token: str) -> Optional["SPSChannelType"]:
        """Return the channel type named by token; None for the unused marker."""
        if token == UNUSED_TOKEN:
            return None
        try:
            return cls(token)
        except ValueError:
            raise ValueError(
                f"Unknown channel type {token!r}; expected one of "
                f"{[t.value for t in cls] + [UNUSED_TOKEN]}"
            ) from None


class RoleLookup(Protocol):
    def channel_type_for(self, uuid: int) -> Optional[SPSChannelType]:
        ...


@dataclass(frozen=True, slots=True)
class ChannelData:
    board: int
    channel: int
    channel_type: SPSChannelType


@dataclass
class ChannelMap:
    """
    Channel identity -> detector role.

    Channels absent from the map (or marked "None" in a map file) resolve to
    None and are skipped by the event builder.
    """
    uuid_to_data: Dict[int, ChannelData]

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[tuple, Any]] = None) -> "ChannelMap":
        """Build from {(board, channel): SPSChannelType | str}."""
        data: Dict[int, ChannelData] = {}
        for (board, channel), ctype in dict(mapping or {}).items():
            if not isinstance(ctype, SPSChannelType):
                ctype = SPSChannelType.parse(str(ctype))
            if ctype is None:
                continue
            uuid = generate_board_channel_uuid(int(board), int(channel))
            data[uuid] = ChannelData(int(board), int(channel), ctype)
        return cls(uuid_to_data=data)

    @classmethod
    def from_entries(cls, entries: Iterable[Any]) -> "ChannelMap":
        """
        Build from config entries: dicts or objects with
        board / channel / channel_type.
        """
        mapping = {}
        for e in entries:
            if isinstance(e, Mapping):
                board, channel, ctype = e["board"], e["channel"], e["channel_type"]
            else:
                board, channel, ctype = e.board, e.channel, e.channel_type
            mapping[(int(board), int(channel))] = ctype
        return cls.from_mapping(mapping)

    @classmethod
    def from_file(cls, path: str | Path) -> "ChannelMap":
        """
        Read a whitespace-separated map file:

            # board channel type
            0 0 AnodeFront
            0 1 None
        """
        p = Path(path)
        mapping = {}
        for lineno, raw in enumerate(p.read_text().splitlines(), start=1):
            s = raw.split("#", 1)[0].strip()
            if not s:
                continue
            parts = s.split()
            if len(parts) != 3:
                raise ValueError(
                    f"{p.name}:{lineno}: expected 'board channel type', got {raw.strip()!r}"
                )
            try:
                board, channel = int(parts[0]), int(parts[1])
            except ValueError:
                raise ValueError(
                    f"{p.name}:{lineno}: board and channel must be integers, got {raw.strip()!r}"
                ) from None
            try:
                ctype = SPSChannelType.parse(parts[2])
            except ValueError as exc:
                raise ValueError(f"{p.name}:{lineno}: {exc}") from None
            if ctype is None:
                continue
            mapping[(board, channel)] = ctype
        return cls.from_mapping(mapping)

    def __len__(self) -> int:
        return len(self.uuid_to_data)

    def get_channel_data(self, uuid: int) -> Optional[ChannelData]:
        return self.uuid_to_data.get(uuid)

    def channel_type_for(self, uuid: int) -> Optional[SPSChannelType]:
        data = self.uuid_to_data.get(uuid)
        return data.channel_type if data is not None else None
