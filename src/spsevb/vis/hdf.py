import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from pathlib import Path

from spsevb.io.table_store import read_column
from spsevb.physics.focal_plane import INVALID_VALUE

def save_column_png(h5_path: str, column: str = "Xavg", out_png: str | None = None, bins: int = 600):
    """Histogram one table column, skipping rows where it was never set."""
    h5_path = str(h5_path)
    values = read_column(h5_path, column)
    values = values[values != INVALID_VALUE]

    if out_png is None:
        out_png = str(Path(h5_path).with_name(f"{Path(h5_path).stem}_{column}.png"))

    plt.figure()
    plt.hist(values, bins=bins, histtype="step")
    plt.xlabel(column)
    plt.ylabel("counts")
    plt.title(Path(h5_path).name + " : " + column + f" ({values.size} rows)")
    plt.tight_layout()
    plt.savefig(out_png, dpi=150)
    plt.close()
    return out_png
