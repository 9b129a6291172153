from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

# Channel identity packs the board number above a 16-bit channel field.
_CHANNEL_BITS = 16
_CHANNEL_MASK = (1 << _CHANNEL_BITS) - 1


def generate_board_channel_uuid(board: int, channel: int) -> int:
    if board < 0 or channel < 0 or channel > _CHANNEL_MASK:
        raise ValueError(f"Invalid board/channel pair ({board}, {channel})")
    return (int(board) << _CHANNEL_BITS) | int(channel)


def decompose_uuid_to_board_channel(uuid: int) -> Tuple[int, int]:
    return int(uuid) >> _CHANNEL_BITS, int(uuid) & _CHANNEL_MASK


@dataclass(slots=True)
class CompassHit:
    """
    One digitizer reading (physics layer).

    uuid: channel identity used for the channel-map lookup
    energy: long-gate charge
    energy_short: short-gate charge (fast component, used for PSD)
    timestamp: time [ns]
    flags: raw digitizer flags, carried through untouched
    """
    uuid: int
    energy: float
    energy_short: float
    timestamp: float
    board: int = -1
    channel: int = -1
    flags: int = 0

    @classmethod
    def from_board_channel(
        cls,
        board: int,
        channel: int,
        energy: float,
        energy_short: float,
        timestamp: float,
        flags: int = 0,
    ) -> "CompassHit":
        return cls(
            uuid=generate_board_channel_uuid(board, channel),
            energy=float(energy),
            energy_short=float(energy_short),
            timestamp=float(timestamp),
            board=int(board),
            channel=int(channel),
            flags=int(flags),
        )
