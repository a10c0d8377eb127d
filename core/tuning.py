"""core/tuning.py — Data-driven tuning constants.

Detection thresholds, alertness rates, clock scales and the fade
length live in ``data/tuning.toml``.  Systems read them through
``get`` with the compiled-in value from ``core.constants`` as the
fallback, so a missing key (or a missing file) never breaks a tick::

    from core.tuning import get as _tun
    threshold = _tun("perception", "react_threshold", REACT_THRESHOLD)

F4 in the cellblock scene calls ``reload()``.
"""

from __future__ import annotations
from pathlib import Path

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib                # pip install tomli

DEFAULT_PATH = Path(__file__).resolve().parent.parent / "data" / "tuning.toml"

_tables: dict[str, dict] = {}
_source: Path = DEFAULT_PATH


def load(path: str | Path | None = None) -> None:
    """Replace the loaded values with the contents of *path*."""
    global _tables, _source
    _source = Path(path) if path is not None else DEFAULT_PATH

    if not _source.is_file():
        print(f"[TUNING] {_source} not found, compiled defaults apply")
        _tables = {}
        return

    with open(_source, "rb") as f:
        raw = tomllib.load(f)

    # Top-level keys outside a [table] are ignored; every knob belongs to a system.
    _tables = {name: body for name, body in raw.items() if isinstance(body, dict)}
    keys = sum(len(body) for body in _tables.values())
    print(f"[TUNING] {keys} values in {len(_tables)} tables from {_source.name}")


def reload() -> None:
    load(_source)


def get(table: str, key: str, default=None):
    """Value of ``[table] key``, or *default* when either is absent."""
    return _tables.get(table, {}).get(key, default)
