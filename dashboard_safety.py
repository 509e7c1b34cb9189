from __future__ import annotations

import logging

import streamlit as st

from dashboards.weekly.dashboard import render_weekly_dashboard
from settings import load_settings

st.set_page_config(page_title="Weekly Safety Violations", layout="wide")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def main() -> None:
    settings = load_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO), format=LOG_FORMAT)

    st.sidebar.header("Navigation")
    st.sidebar.caption(f"Manifest: {settings.manifest_file}")

    render_weekly_dashboard(settings)


if __name__ == "__main__":
    main()
