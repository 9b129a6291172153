from pathlib import Path

import pytest
from typer.testing import CliRunner

from spsevb.cli.viz import app
from spsevb.config.channel_map import ChannelMap
from spsevb.io.table_store import write_table
from spsevb.physics.hits import CompassHit
from spsevb.table.sps_data import SPSData
from spsevb.vis.hdf import save_column_png


def _table(tmp_path: Path) -> Path:
    cmap = ChannelMap.from_mapping({(0, 2): "ScintLeft"})
    data = SPSData()
    for i in range(10):
        hits = [CompassHit.from_board_channel(0, 2, 100.0 + i, 1.0, 0.0)] if i % 2 else []
        data.append_event(hits, cmap)
    out = tmp_path / "table.h5"
    write_table(out, data.convert_to_frame())
    return out


def test_save_column_png(tmp_path: Path):
    h5 = _table(tmp_path)
    png = save_column_png(str(h5), column="ScintLeftEnergy", bins=10)
    assert Path(png).exists()
    assert Path(png).name == "table_ScintLeftEnergy.png"
    with pytest.raises(KeyError):
        save_column_png(str(h5), column="NotAColumn")


def test_viz_cli(tmp_path: Path):
    h5 = _table(tmp_path)
    out = tmp_path / "x.png"
    result = CliRunner().invoke(app, [str(h5), "--column", "ScintLeftEnergy", "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert out.exists()
