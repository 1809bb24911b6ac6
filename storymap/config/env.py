"""Environment — .env loading and the variables the services read."""

from __future__ import annotations

import os
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]

FEATURES_URL_VAR = "STORYMAP_FEATURES_URL"
FEATURES_KEY_VAR = "STORYMAP_FEATURES_API_KEY"
ORDERS_DIR_VAR = "STORYMAP_ORDERS_DIR"


# ── .env loader ────────────────────────────────────────────────────

def load_env(root: Path = ROOT) -> None:
    """Copy KEY=VALUE lines from .env / .env.local into os.environ.

    Variables already set in the process environment win.
    """
    for name in (".env", ".env.local"):
        p = root / name
        if p.exists():
            for line in p.read_text(encoding="utf-8").splitlines():
                line = line.strip()
                if line and "=" in line and not line.startswith("#"):
                    k, v = line.split("=", 1)
                    k = k.strip()
                    v = v.strip().strip('"').strip("'")
                    if k and k not in os.environ:
                        os.environ[k] = v


def orders_dir() -> Path:
    return Path(os.environ.get(ORDERS_DIR_VAR) or ROOT / "outputs" / "orders")
