from pathlib import Path

import pytest

from spsevb.config.channel_map import ChannelMap, SPSChannelType
from spsevb.physics.hits import (
    CompassHit,
    decompose_uuid_to_board_channel,
    generate_board_channel_uuid,
)

MAP_TEXT = """\
# board channel type
0 0 AnodeFront
0 1 AnodeBack   # trailing comment
0 2 None

1 8 DelayFrontLeft
"""

def test_uuid_roundtrip():
    uuid = generate_board_channel_uuid(3, 15)
    assert decompose_uuid_to_board_channel(uuid) == (3, 15)
    assert generate_board_channel_uuid(0, 1) != generate_board_channel_uuid(1, 0)
    with pytest.raises(ValueError):
        generate_board_channel_uuid(0, -1)

def test_from_file(tmp_path: Path):
    p = tmp_path / "ChannelMap.txt"
    p.write_text(MAP_TEXT)
    cmap = ChannelMap.from_file(p)
    assert len(cmap) == 3
    assert cmap.channel_type_for(generate_board_channel_uuid(0, 0)) is SPSChannelType.AnodeFront
    assert cmap.channel_type_for(generate_board_channel_uuid(0, 2)) is None
    assert cmap.channel_type_for(generate_board_channel_uuid(7, 7)) is None
    data = cmap.get_channel_data(generate_board_channel_uuid(1, 8))
    assert (data.board, data.channel, data.channel_type) == (1, 8, SPSChannelType.DelayFrontLeft)

def test_from_file_rejects_bad_lines(tmp_path: Path):
    p = tmp_path / "bad.txt"
    p.write_text("0 0 AnodeFront\n0 1 Wire\n")
    with pytest.raises(ValueError, match="bad.txt:2"):
        ChannelMap.from_file(p)
    p.write_text("0 AnodeFront\n")
    with pytest.raises(ValueError, match="bad.txt:1"):
        ChannelMap.from_file(p)

def test_from_entries_accepts_dicts_and_strings():
    cmap = ChannelMap.from_entries([
        {"board": 0, "channel": 4, "channel_type": "Cathode"},
        {"board": 0, "channel": 5, "channel_type": SPSChannelType.Cebra3},
    ])
    hit = CompassHit.from_board_channel(0, 5, 1.0, 0.5, 10.0)
    assert cmap.channel_type_for(hit.uuid) is SPSChannelType.Cebra3
    assert cmap.channel_type_for(generate_board_channel_uuid(0, 4)) is SPSChannelType.Cathode
