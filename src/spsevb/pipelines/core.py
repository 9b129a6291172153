from __future__ import annotations

from itertools import islice
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
import typer

import numpy as np

from spsevb.config.channel_map import ChannelMap
from spsevb.config.load import load_channel_map, load_config
from spsevb.config.schemas import Config, FocalPlaneCfg
from spsevb.io.adapters import make_adapter
from spsevb.io.table_store import write_table
from spsevb.physics.focal_plane import INVALID_VALUE, Weights
from spsevb.physics.hits import CompassHit
from spsevb.table.diagnostics import BuildDiagnostics
from spsevb.table.fields import SPSDataField
from spsevb.table.sps_data import SPSData, concat_sps_data
from spsevb.vis.hdf import save_column_png


def _iter_source_events(cfg: Config, base_dir: Path) -> Iterable[List[CompassHit]]:
    """
    Unified event source: the configured adapter reads cfg.io.input_path
    (relative paths resolve against the config file's directory).
    """
    adapter = make_adapter(cfg.io.adapter)
    p = Path(cfg.io.input_path)
    if not p.is_absolute():
        p = base_dir / p
    return adapter.iter_events(str(p))


def build_table(
    events: Iterable[Iterable[CompassHit]],
    channel_map: ChannelMap,
    weights: Optional[Weights] = None,
    *,
    chunk_events: Optional[int] = None,
    diagnostics_level: int = 0,
) -> Tuple[SPSData, BuildDiagnostics]:
    """
    Feed every event into SPSData, one private builder per chunk of
    `chunk_events` events, then merge the chunks in stream order.
    """
    diag = BuildDiagnostics()
    parts: List[SPSData] = []
    data = SPSData()
    for ev in events:
        data.append_event(ev, channel_map, weights, diagnostics=diag)
        if chunk_events is not None and data.rows >= chunk_events:
            if diagnostics_level >= 2:
                print(f"[table] Closed chunk {len(parts)} with {data.rows} rows")
            parts.append(data)
            data = SPSData()
    parts.append(data)

    if len(parts) == 1:
        return parts[0], diag
    return concat_sps_data(parts), diag


def run_pipeline(
    cfg_path: str,
    *,
    weights: Optional[Weights] = None,
    max_events: Optional[int] = None,
) -> Path:
    """
    Build the SPS event table from a TOML config file.

    CLI flags (--weights/--max-events) override the corresponding config
    fields when not None.

    Parameters
    ----------
    cfg_path : str
        Path to TOML configuration file.

    Returns
    -------
    Path to written HDF5 file.
    """
    cfg = load_config(cfg_path)
    base_dir = Path(cfg_path).resolve().parent

    # ---- apply CLI overrides on top of TOML ----
    if weights is not None:
        cfg.focal_plane = FocalPlaneCfg(weights=tuple(weights))
    if max_events is not None:
        cfg.run.max_events = max_events

    diag_level = cfg.run.diagnostics_level

    if diag_level >= 1:
        print(f"[run] config = {cfg_path}")
        print(f"[run] input={cfg.io.input_path} -> output={cfg.io.output_path}")
        print(f"[run] weights={cfg.focal_plane.weights} max_events={cfg.run.max_events} "
              f"chunk_events={cfg.run.chunk_events}")

    channel_map = load_channel_map(cfg, base_dir=base_dir)
    if diag_level >= 1:
        print(f"[run] channel map has {len(channel_map)} mapped channels")
    if len(channel_map) == 0 and diag_level >= 1:
        print("[run] WARNING: empty channel map; every column will stay unset")

    events: Iterable[List[CompassHit]] = _iter_source_events(cfg, base_dir)
    if cfg.run.max_events is not None:
        events = islice(events, cfg.run.max_events)

    data, diag = build_table(
        events,
        channel_map,
        cfg.focal_plane.weights,
        chunk_events=cfg.run.chunk_events,
        diagnostics_level=diag_level,
    )

    if diag_level >= 1:
        print(f"[pipeline] Built {data.rows} rows from {diag.total_hits} hits "
              f"({diag.unmapped_hits} unmapped, {diag.duplicate_role_hits} duplicate-role)")
        print(f"[pipeline] Full focal-plane events: {diag.focal_plane_events}")
        if diag.duplicate_role_hits and diag_level >= 2:
            print("[pipeline] Duplicate roles resolved by last hit in file order")
        if diag_level >= 2 and data.rows:
            x1 = data.column(SPSDataField.X1)
            set_x1 = x1[x1 != INVALID_VALUE]
            if set_x1.size:
                print(f"[pipeline] X1 stats: min={float(np.min(set_x1))} "
                      f"max={float(np.max(set_x1))} n={set_x1.size}")
            print(f"[pipeline] Role counts: {diag.role_counts}")

    frame = data.convert_to_frame()

    out_path = Path(cfg.io.output_path)
    if not out_path.is_absolute():
        out_path = base_dir / out_path
    out_path.parent.mkdir(parents=True, exist_ok=True)
    write_table(out_path, frame, cfg_path=cfg_path, diagnostics=diag)
    if diag_level >= 1:
        print(f"[table] Wrote {len(frame)} rows x {len(frame.columns)} columns to {out_path}")

    # Optional PNG export
    if cfg.vis.export_png_on_write:
        try:
            out_png = save_column_png(str(out_path), column=cfg.vis.column, bins=cfg.vis.bins)
            if diag_level >= 1:
                print(f"[pipeline] Wrote PNG {out_png} from {cfg.vis.column}")
        except KeyError as e:
            if diag_level >= 1:
                print(f"[pipeline] PNG export failed: {e!r}")

    return out_path


# ---------------------------------------------------------------------------
# Unified CLI entry point
# ---------------------------------------------------------------------------

app = typer.Typer(help="SPS focal-plane event builder (spsevb.pipelines.core)")


@app.command()
def main(
    cfg_path: str = typer.Argument(
        ...,
        help="Path to TOML config file",
    ),
    weights: Optional[Tuple[float, float]] = typer.Option(
        None,
        "--weights",
        help="Override [focal_plane].weights: Xavg = W0*X1 + W1*X2",
    ),
    max_events: Optional[int] = typer.Option(
        None,
        "--max-events",
        help="Override [run].max_events",
    ),
):
    """
    Build the SPS event table for a single config.
    """
    if weights is not None and None in weights:
        weights = None
    out_path = run_pipeline(cfg_path, weights=weights, max_events=max_events)
    typer.echo(str(out_path))


if __name__ == "__main__":
    app()
