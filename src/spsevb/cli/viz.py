from __future__ import annotations

import typer
from typing import Optional

from spsevb.vis.hdf import save_column_png

app = typer.Typer(help="SPS event table visualization tools")

@app.command("col-to-png")
def col_to_png(
    h5_path: str = typer.Argument(..., help="Path to HDF5 file containing /sps"),
    column: str = typer.Option("Xavg", "--column", "-c", help="Column name, e.g. X1, Theta"),
    bins: int = typer.Option(600, "--bins", "-b", help="Number of histogram bins"),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Output PNG path (defaults to file_<column>.png)"),
):
    """Histogram one column of /sps (unset rows excluded) to a PNG."""
    out_png = save_column_png(h5_path, column=column, out_png=out, bins=bins)
    typer.echo(f"Wrote {out_png}")

if __name__ == "__main__":
    app()
