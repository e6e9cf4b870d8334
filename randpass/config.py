# randpass/config.py
"""
Settings persistence for randpass.
Settings saved as JSON in %APPDATA%/randpass/config.json (Windows) or
~/.randpass/config.json (fallback); RANDPASS_CONFIG points elsewhere.
"""

import logging
import os
from typing import Dict, Any, Optional

from .options import GenerationOptions
from .pool import DEFAULT_POOL_SIZE
from .storage import atomic_read_bytes, atomic_write_bytes, default_config_path, dump_json_bytes, read_json_bytes

log = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "timeout_seconds": 5,
    "pool_size": DEFAULT_POOL_SIZE,
    "options": GenerationOptions().to_dict(),
}


def _defaults() -> Dict[str, Any]:
    out = DEFAULTS.copy()
    out["options"] = dict(DEFAULTS["options"])
    return out

def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    p = path or default_config_path()
    if not os.path.exists(p):
        return _defaults()
    try:
        data = read_json_bytes(atomic_read_bytes(p)) or {}
    except (OSError, ValueError) as e:
        log.warning("Ignoring unreadable config %s: %s", p, e)
        return _defaults()
    if not isinstance(data, dict):
        log.warning("Ignoring config %s: expected a JSON object", p)
        return _defaults()
    # merge defaults, options key by key
    out = _defaults()
    options = data.pop("options", None) or {}
    if not isinstance(options, dict):
        log.warning("Ignoring non-object options in %s", p)
        options = {}
    out.update(data)
    out["options"].update(options)
    pool_size = out.get("pool_size")
    if isinstance(pool_size, bool) or not isinstance(pool_size, int) or pool_size <= 0:
        log.warning("Ignoring invalid pool_size %r in %s", pool_size, p)
        out["pool_size"] = DEFAULTS["pool_size"]
    return out

def save_config(cfg: Dict[str, Any], path: Optional[str] = None) -> str:
    p = path or default_config_path()
    atomic_write_bytes(p, dump_json_bytes(cfg))
    log.debug("Saved config to %s", p)
    return p

def options_from_config(cfg: Dict[str, Any]) -> GenerationOptions:
    return GenerationOptions.from_dict(cfg.get("options") or {})
