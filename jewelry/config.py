from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import streamlit as st

CONFIG_FILE_NAME = "settings.json"
ENV_DATA_DIR = "JEWELRY_DASH_DATA_DIR"
ENV_LOG_LEVEL = "JEWELRY_DASH_LOG_LEVEL"
ENV_CURRENCY = "JEWELRY_DASH_CURRENCY"
ENV_SHOP_NAME = "JEWELRY_DASH_SHOP_NAME"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    currency: str = "₹"
    shop_name: str = "Jewelry Admin"
    log_level: str = "INFO"


def _default_data_dir() -> Path:
    return Path.home() / ".jewelry_dashboard"


def load_persisted_settings(data_dir: Path) -> dict:
    cfg = data_dir / CONFIG_FILE_NAME
    if not cfg.exists():
        return {}
    try:
        payload = json.loads(cfg.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return payload if isinstance(payload, dict) else {}


def persist_data_dir(data_dir_str: str) -> None:
    data_dir = Path(data_dir_str).expanduser().resolve()
    data_dir.mkdir(parents=True, exist_ok=True)

    cfg = data_dir / CONFIG_FILE_NAME
    payload = {"data_dir": str(data_dir)}
    cfg.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    # Update session for immediate effect
    st.session_state["jewelry_data_dir"] = str(data_dir)


def resolve_data_dir(session_value: str | None = None) -> Path:
    # Priority order:
    # 1) Session state (set via Data Management page)
    # 2) Environment variable
    # 3) Persisted settings in default folder
    # 4) Default folder
    if session_value:
        return Path(session_value).expanduser().resolve()
    if os.getenv(ENV_DATA_DIR):
        return Path(os.getenv(ENV_DATA_DIR, "")).expanduser().resolve()
    default_dir = _default_data_dir()
    persisted = load_persisted_settings(default_dir)
    return Path(persisted.get("data_dir", default_dir)).expanduser().resolve()


@st.cache_resource
def get_settings() -> Settings:
    data_dir = resolve_data_dir(st.session_state.get("jewelry_data_dir"))
    data_dir.mkdir(parents=True, exist_ok=True)
    return Settings(
        data_dir=data_dir,
        db_path=data_dir / "jewelry.db",
        currency=os.getenv(ENV_CURRENCY, "₹"),
        shop_name=os.getenv(ENV_SHOP_NAME, "Jewelry Admin"),
        log_level=os.getenv(ENV_LOG_LEVEL, "INFO").upper(),
    )
