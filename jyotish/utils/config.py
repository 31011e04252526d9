import copy
import logging
import os

import yaml

from jyotish.core.chart import EngineSettings

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/defaults.yaml"

# Built-in values; the YAML file and env vars override these.
DEFAULTS = {
    "mode": "sidereal",
    "ayanamsa": "lahiri",
    "house_system": "whole-sign",
    "apply_timezone_offset": True,
    "dasha": {"cycles": 2, "max_periods": 20},
    "chart_store": {"capacity": 1024},
}

class AttrDict(dict):
    """Dict that also supports attribute access: cfg.mode and cfg['mode'] both work."""
    def __getattr__(self, item):
        try:
            return self[item]
        except KeyError as e:
            raise AttributeError(item) from e
    def __setattr__(self, key, value):
        self[key] = value

def _to_attr(obj):
    if isinstance(obj, dict):
        return AttrDict({k: _to_attr(v) for k, v in obj.items()})
    if isinstance(obj, list):
        return [_to_attr(x) for x in obj]
    return obj

def _merge(base, override):
    out = dict(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out

def _env_bool(name):
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip().lower() in ("1", "true", "yes", "on")

def _env_int(name):
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    try:
        return int(v)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {v!r}") from None

def load_config(path: str = None):
    """
    Load YAML config from `path` (default: $ASTRO_CONFIG or config/defaults.yaml),
    merged over DEFAULTS. Optional env overrides:
      - ASTRO_APPLY_TZ_OFFSET       (apply_timezone_offset)
      - ASTRO_DASHA_CYCLES          (dasha.cycles)
      - ASTRO_DASHA_MAX_PERIODS     (dasha.max_periods)
      - ASTRO_CHART_STORE_CAPACITY  (chart_store.capacity)
    Returns an AttrDict for convenient access.
    """
    path = path or os.environ.get("ASTRO_CONFIG", DEFAULT_CONFIG_PATH)
    data = copy.deepcopy(DEFAULTS)
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            data = _merge(data, yaml.safe_load(f) or {})
    else:
        log.info("config file %s not found; using built-in defaults", path)

    apply_tz = _env_bool("ASTRO_APPLY_TZ_OFFSET")
    if apply_tz is not None:
        data["apply_timezone_offset"] = apply_tz
    cycles = _env_int("ASTRO_DASHA_CYCLES")
    if cycles is not None:
        data["dasha"]["cycles"] = cycles
    max_periods = _env_int("ASTRO_DASHA_MAX_PERIODS")
    if max_periods is not None:
        data["dasha"]["max_periods"] = max_periods
    capacity = _env_int("ASTRO_CHART_STORE_CAPACITY")
    if capacity is not None:
        data["chart_store"]["capacity"] = capacity

    return _to_attr(data)

def engine_settings(cfg) -> EngineSettings:
    """Project the loaded config onto the engine's settings record."""
    dasha = cfg.get("dasha") or {}
    max_periods = dasha.get("max_periods")
    return EngineSettings(
        apply_timezone_offset=bool(cfg.get("apply_timezone_offset", True)),
        dasha_cycles=int(dasha.get("cycles", 2)),
        dasha_max_periods=int(max_periods) if max_periods is not None else None,
    )
