from __future__ import annotations
from .schemas import Config
from .channel_map import ChannelMap
from pathlib import Path
import json

try:
    import tomllib  # py311+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # py<=310

def load_config(path: str | Path) -> Config:
    p = Path(path)
    data = tomllib.loads(p.read_text())
    return Config(**data)

def snapshot_config_toml(path: str | Path) -> str:
    """Return the raw TOML text for embedding in HDF5 metadata."""
    return Path(path).read_text()

def json_dumps(obj) -> str:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)

def load_channel_map(cfg: Config, base_dir: str | Path | None = None) -> ChannelMap:
    """
    Build the channel map from [channel_map]: the file first (relative paths
    resolve against base_dir), then inline entries on top.
    """
    cm_cfg = cfg.channel_map
    mapping = {}
    if cm_cfg.path:
        p = Path(cm_cfg.path)
        if not p.is_absolute() and base_dir is not None:
            p = Path(base_dir) / p
        from_file = ChannelMap.from_file(p)
        mapping.update({(d.board, d.channel): d.channel_type for d in from_file.uuid_to_data.values()})
    for e in cm_cfg.entries:
        mapping[(e.board, e.channel)] = e.channel_type
    return ChannelMap.from_mapping(mapping)
