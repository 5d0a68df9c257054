# panchang/utils/config.py
import os
import yaml

DEFAULT_CONFIG_PATH = "config/defaults.yaml"

# env var → config key; the same names EngineSettings reads where they overlap
_ENV_OVERRIDES = (
    ("PANCHANG_AYANAMSA_DEFAULT", "ayanamsa"),
    ("PANCHANG_EVALUATE_AT", "evaluate_at"),
    ("PANCHANG_DEFAULT_TZ", "timezone"),
    ("PANCHANG_DEFAULT_TIME", "default_time"),
)


class AttrDict(dict):
    """Dict that also supports attribute access: cfg.evaluate_at and cfg['evaluate_at'] both work."""
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

def config_path() -> str:
    return os.getenv("PANCHANG_CONFIG", DEFAULT_CONFIG_PATH)

def load_config(path: str):
    """
    Service defaults for request fields the caller left out.

    Reads YAML from `path`, then lets the environment win per key:
      PANCHANG_AYANAMSA_DEFAULT → ayanamsa (system id)
      PANCHANG_EVALUATE_AT      → evaluate_at (sunrise | instant)
      PANCHANG_DEFAULT_TZ       → timezone
      PANCHANG_DEFAULT_TIME     → default_time (HH:MM)
    Values are not validated here; a bad default surfaces as a 400 on the
    first request that relies on it.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    for env, key in _ENV_OVERRIDES:
        value = os.getenv(env)
        if value and value.strip():
            data[key] = value.strip()

    return _to_attr(data)
