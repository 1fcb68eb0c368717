"""Persistent JSON preference helpers.

Stores the expanded-node set, view toggles, ordering, and theme.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from ..tree_model.types import COST_METRIC_CHOICES, ORDER_BY_CHOICES

APP_NAME = "traceview"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_ORDER_BY = "scan"
DEFAULT_COST_METRIC = "total"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _update_config(key: str, value: object) -> None:
    config = load_config()
    config[key] = value
    save_config(config)


def _load_bool(key: str, default: bool) -> bool:
    """Only explicit booleans are accepted; anything else yields ``default``."""
    value = load_config().get(key)
    return value if isinstance(value, bool) else default


def _load_choice(key: str, choices: tuple[str, ...], default: str) -> str:
    value = load_config().get(key)
    return value if isinstance(value, str) and value in choices else default


def load_expanded_ids() -> set[str]:
    """Load persisted expanded node ids; non-string entries are dropped."""
    value = load_config().get("expanded")
    if not isinstance(value, list):
        return set()
    return {item for item in value if isinstance(item, str) and item}


def save_expanded_ids(expanded: set[str]) -> None:
    """Persist expanded node ids as a sorted list."""
    _update_config("expanded", sorted(item for item in expanded if item))


def load_show_excluded() -> bool:
    """Return the persisted show-excluded toggle (default ``True``)."""
    return _load_bool("show_excluded", True)


def save_show_excluded(show_excluded: bool) -> None:
    _update_config("show_excluded", bool(show_excluded))


def load_order_by() -> str:
    return _load_choice("order_by", ORDER_BY_CHOICES, DEFAULT_ORDER_BY)


def save_order_by(order_by: str) -> None:
    if order_by not in ORDER_BY_CHOICES:
        return
    _update_config("order_by", order_by)


def load_cost_metric() -> str:
    return _load_choice("cost_metric", COST_METRIC_CHOICES, DEFAULT_COST_METRIC)


def save_cost_metric(cost_metric: str) -> None:
    if cost_metric not in COST_METRIC_CHOICES:
        return
    _update_config("cost_metric", cost_metric)


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    value = load_config().get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def save_theme_name(theme_name: str) -> None:
    """Persist selected UI theme name."""
    stripped = str(theme_name).strip()
    if not stripped:
        return
    _update_config("theme", stripped)
