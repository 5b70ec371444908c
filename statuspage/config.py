import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

load_dotenv()

# Allow root override (useful in Docker)
ROOT = Path(os.getenv("STATUSPAGE_ROOT", Path(__file__).resolve().parents[1]))

DATA_DIR = Path(os.getenv("STATUSPAGE_DATA_DIR", ROOT / "data"))
CONFIG_PATH = Path(os.getenv("STATUSPAGE_CONFIG_PATH", ROOT / "config" / "statuspage.yaml"))

DEBUG = os.getenv("STATUSPAGE_DEBUG", "false").lower() == "true"


def load_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_settings(path: Path = None) -> Dict[str, Any]:
    raw = load_yaml(path or CONFIG_PATH)
    return {
        "recent_items": int(raw.get("recent_items", 3)),
        "cors_origins": list(raw.get("cors_origins", ["http://localhost:3000"])),
    }
