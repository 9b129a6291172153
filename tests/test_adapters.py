from pathlib import Path

import h5py
import numpy as np
import pandas as pd
import pytest

from spsevb.io.adapters import HitTableAdapter, make_adapter
from spsevb.physics.hits import generate_board_channel_uuid


def _hits_frame():
    return pd.DataFrame({
        "event":        [7, 7, 3, 7, 5],
        "board":        [0, 0, 1, 1, 0],
        "channel":      [8, 9, 0, 0, 0],
        "energy":       [10.0, 11.0, 12.0, 13.0, 14.0],
        "energy_short": [1.0, 1.1, 1.2, 1.3, 1.4],
        "timestamp":    [1000.0, 2000.0, 3000.0, 4000.0, 5000.0],
    })


def test_csv_groups_by_first_appearance(tmp_path: Path):
    p = tmp_path / "hits.csv"
    _hits_frame().to_csv(p, index=False)
    events = list(HitTableAdapter().iter_events(str(p)))
    assert [len(ev) for ev in events] == [3, 1, 1]
    first = events[0]
    assert [h.energy for h in first] == [10.0, 11.0, 13.0]
    assert first[0].uuid == generate_board_channel_uuid(0, 8)
    assert first[2].board == 1 and first[2].channel == 0


def test_ps_times_and_renamed_columns(tmp_path: Path):
    p = tmp_path / "hits.csv"
    _hits_frame().rename(columns={"event": "evt", "timestamp": "t_ps"}).to_csv(p, index=False)
    ad = make_adapter({"type": "table", "time_units": "ps", "columns": {"event": "evt", "timestamp": "t_ps"}})
    events = list(ad.iter_events(str(p)))
    assert np.isclose(events[0][0].timestamp, 1.0)


def test_hdf5_input(tmp_path: Path):
    p = tmp_path / "hits.h5"
    df = _hits_frame()
    with h5py.File(p, "w") as f:
        g = f.create_group("hits")
        for name in df.columns:
            g.create_dataset(name, data=df[name].to_numpy())
    events = list(HitTableAdapter().iter_events(str(p)))
    assert len(events) == 3
    assert events[1][0].energy == 12.0


def test_rejects_missing_columns_and_suffix(tmp_path: Path):
    p = tmp_path / "hits.csv"
    _hits_frame().drop(columns=["energy_short"]).to_csv(p, index=False)
    with pytest.raises(ValueError, match="energy_short"):
        list(HitTableAdapter().iter_events(str(p)))
    with pytest.raises(ValueError):
        list(HitTableAdapter().iter_events(str(tmp_path / "hits.bin")))
    with pytest.raises(ValueError):
        make_adapter({"type": "root"})


def test_rejects_missing_event_ids(tmp_path: Path):
    p = tmp_path / "hits.csv"
    df = _hits_frame()
    df["event"] = df["event"].astype(float)
    df.loc[2, "event"] = np.nan
    df.to_csv(p, index=False)
    with pytest.raises(ValueError, match="without an event id"):
        list(HitTableAdapter().iter_events(str(p)))
