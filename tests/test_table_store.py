from pathlib import Path

import h5py
import numpy as np

from spsevb.config.channel_map import ChannelMap
from spsevb.io.table_store import read_column, read_table, write_columns, write_table
from spsevb.physics.focal_plane import INVALID_VALUE
from spsevb.physics.hits import CompassHit
from spsevb.table.diagnostics import BuildDiagnostics
from spsevb.table.fields import SPSDataField
from spsevb.table.sps_data import SPSData

CMAP = ChannelMap.from_mapping({(0, 2): "ScintLeft"})


def _built(n=3):
    data = SPSData()
    for i in range(n):
        data.append_event([CompassHit.from_board_channel(0, 2, 100.0 + i, 10.0, 50.0 * i)], CMAP)
    return data


def test_hdf5_table_write_read(tmp_path: Path):
    out = tmp_path / "table.h5"
    frame = _built().convert_to_frame()
    diag = BuildDiagnostics(total_events=3)
    write_table(out, frame, diagnostics=diag)

    back = read_table(out)
    assert list(back.columns) == SPSDataField.column_names()
    np.testing.assert_array_equal(back["ScintLeftEnergy"].to_numpy(), [100.0, 101.0, 102.0])
    assert (back["Theta"] == INVALID_VALUE).all()

    with h5py.File(out, "r") as f:
        assert f.attrs["format_version"] == "1.0"
        assert int(f["sps"].attrs["rows"]) == 3
        assert '"total_events":3' in f["sps"].attrs["diagnostics"]


def test_write_columns_keeps_order(tmp_path: Path):
    out = tmp_path / "cols.h5"
    cfg = tmp_path / "run.toml"
    cfg.write_text("[io]\ninput_path='a'\noutput_path='b'\n")
    write_columns(out, _built(2).into_columns(), cfg_path=cfg)
    assert list(read_table(out).columns) == SPSDataField.column_names()
    assert read_column(out, "ScintLeftTime").tolist() == [0.0, 50.0]
    with h5py.File(out, "r") as f:
        assert "input_path" in f.attrs["config_text"]
