from __future__ import annotations
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence, Tuple

import h5py
import numpy as np
import pandas as pd

from spsevb.config.load import json_dumps, snapshot_config_toml
from spsevb.table.diagnostics import BuildDiagnostics

FORMAT_VERSION = "1.0"
TABLE_GROUP = "sps"


def write_table(
    path: str | Path,
    frame: pd.DataFrame,
    cfg_path: Optional[str | Path] = None,
    diagnostics: Optional[BuildDiagnostics] = None,
) -> Path:
    """
    Store the event table under /sps, one float64 dataset per column.

    Layout:

    /                attrs: format_version, created_utc, software, config_text
    /sps             attrs: columns (ordered names), rows, [diagnostics json]
    /sps/<column>    (rows,) float64
    """
    path = Path(path)
    with h5py.File(path, "w") as f:
        f.attrs["format_version"] = FORMAT_VERSION
        f.attrs["created_utc"] = datetime.now(timezone.utc).isoformat()
        f.attrs["software"] = "spsevb 0.1.0"
        f.attrs["config_text"] = snapshot_config_toml(cfg_path) if cfg_path is not None else ""

        grp = f.create_group(TABLE_GROUP)
        columns = [str(c) for c in frame.columns]
        grp.attrs["columns"] = np.array(columns, dtype=h5py.string_dtype())
        grp.attrs["rows"] = int(len(frame))
        if diagnostics is not None:
            grp.attrs["diagnostics"] = json_dumps(vars(diagnostics))
        for name in columns:
            grp.create_dataset(
                name,
                data=frame[name].to_numpy(dtype=np.float64),
                compression="gzip",
            )
    return path


def write_columns(
    path: str | Path,
    pairs: Sequence[Tuple[str, np.ndarray]],
    cfg_path: Optional[str | Path] = None,
) -> Path:
    """Write (name, values) pairs as handed over by SPSData.into_columns()."""
    return write_table(path, pd.DataFrame(dict(pairs)), cfg_path=cfg_path)


def read_table(path: str | Path) -> pd.DataFrame:
    path = str(path)
    with h5py.File(path, "r") as f:
        if TABLE_GROUP not in f:
            raise KeyError(f"/{TABLE_GROUP} not found in {path}")
        grp = f[TABLE_GROUP]
        columns = [c.decode() if isinstance(c, bytes) else str(c) for c in grp.attrs["columns"]]
        data = {name: np.array(grp[name], dtype=np.float64) for name in columns}
    return pd.DataFrame(data, columns=columns)


def read_column(path: str | Path, column: str) -> np.ndarray:
    path = str(path)
    with h5py.File(path, "r") as f:
        dset = f"/{TABLE_GROUP}/{column}"
        if dset not in f:
            raise KeyError(f"{dset} not found in {path}")
        return np.array(f[dset], dtype=np.float64)
