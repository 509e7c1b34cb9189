"""
Configuration for the weekly safety violations dashboard.

Streamlit Secrets take priority (Streamlit Cloud); a local .env or the process
environment is the fallback for local development.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import streamlit as st
from dotenv import load_dotenv
from streamlit.errors import StreamlitAPIException

load_dotenv()

DEFAULT_DATA_DIR = "data"
MANIFEST_NAME = "manifest.json"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    manifest_file: Path
    log_level: str = DEFAULT_LOG_LEVEL


def _read_secret(name: str) -> Optional[str]:
    try:
        value = st.secrets.get(name)
    except (FileNotFoundError, StreamlitAPIException):
        # No secrets.toml configured.
        return None
    return str(value) if value is not None else None


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    return _read_secret(name) or os.getenv(name) or default


def load_settings() -> Settings:
    data_dir = Path(get_setting("SAFETY_DATA_DIR", DEFAULT_DATA_DIR))
    manifest_file = Path(get_setting("SAFETY_MANIFEST_FILE") or data_dir / MANIFEST_NAME)
    log_level = get_setting("SAFETY_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    return Settings(data_dir=data_dir, manifest_file=manifest_file, log_level=log_level)
