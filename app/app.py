"""
Routing only.

All view logic lives in app/views/.
All env reads happen ONLY in config.py.

Public route: `?verify=<register number>` (certificate QR codes) skips sign-in.
Everything else requires an administrator session.
"""

from __future__ import annotations

import os
import sys

# Make `app/` importable as a flat module path when running:
#   streamlit run app/app.py
APP_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(APP_DIR, ".."))
for p in [APP_DIR, REPO_ROOT]:
    if p not in sys.path:
        sys.path.insert(0, p)

import streamlit as st  # noqa: E402

from components.header import render_header  # noqa: E402
from components.sidebar import render_sidebar  # noqa: E402
from components.styles import APP_TITLE, apply_theme  # noqa: E402
from config import get_config  # noqa: E402
from data.service import get_college_logo  # noqa: E402
from logs import get_logger, setup_logging  # noqa: E402

from views import (  # noqa: E402
    certificate_preview,
    dashboard,
    events,
    login,
    participation,
    programs,
    resources,
    settings,
    verification,
)

logger = get_logger("app")

VIEWS = {
    "dashboard": dashboard,
    "programs": programs,
    "events": events,
    "requests": participation,
    "resources": resources,
    "certificates": certificate_preview,
    "settings": settings,
}


def main() -> None:
    apply_theme()
    cfg = get_config()
    setup_logging(cfg.log_level, cfg.log_json)
    use_mock = st.session_state.get("use_mock", cfg.default_use_mock)

    verify = st.query_params.get("verify")
    if verify:
        render_header(
            app_name=cfg.college_name.title(),
            subtitle=cfg.meet_title.title(),
            right_pill="Certificate verification",
            logo=get_college_logo(cfg, use_mock).data,
        )
        verification.render(cfg, use_mock, verify)
        return

    profile = login.current_profile()
    if profile is None:
        login.render(cfg, use_mock)
        return

    state = render_sidebar(cfg, user_name=profile.name)
    if state.sign_out:
        login.sign_out(cfg, state.use_mock)
        st.rerun()

    render_header(
        app_name=APP_TITLE,
        subtitle=f"{cfg.meet_title.title()} · {cfg.meet_dates}",
        right_pill=f"Data: {'Demo' if state.use_mock else 'Supabase (fallback to demo)'}",
        logo=get_college_logo(cfg, state.use_mock).data,
    )

    # Routing only
    view = VIEWS.get(state.view)
    if view is None:
        logger.error("unknown_view", view=state.view)
        st.error("Unknown view")
        return
    view.render(cfg, state.use_mock)


if __name__ == "__main__":
    main()
