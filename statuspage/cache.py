import json
from pathlib import Path
from typing import Any, Dict, Tuple

# Parsed gateway files only. View results are never cached.
_cache: Dict[Tuple[str, str], Any] = {}


def file_sig(path: Path) -> str:
    st = path.stat()
    return f"{path.name}:{st.st_mtime_ns}:{st.st_size}"


def load_json_cached(path: Path) -> Any:
    if not path.exists():
        return []
    key = ("json", f"{path.resolve()}|{file_sig(path)}")
    if key in _cache:
        return _cache[key]
    with open(path, "r", encoding="utf-8") as f:
        obj = json.load(f)
    _cache[key] = obj
    return obj


def cache_size() -> int:
    return len(_cache)


def clear_cache() -> None:
    _cache.clear()
