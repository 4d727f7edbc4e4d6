from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import streamlit as st

from config import AppConfig


@dataclass(frozen=True)
class SidebarState:
    view: str
    use_mock: bool
    sign_out: bool = False


NAV_ITEMS = [
    ("📊 Dashboard", "dashboard"),
    ("🗂️ Programs", "programs"),
    ("🏃 Events", "events"),
    ("📨 Requests", "requests"),
    ("🏫 Resources", "resources"),
    ("📜 Certificates", "certificates"),
    ("⚙️ Settings", "settings"),
]


def render_data_toggle(cfg: AppConfig) -> bool:
    use_mock = st.toggle(
        "Use demo data",
        value=st.session_state.get("use_mock", cfg.default_use_mock),
        help="When off, the console talks to Supabase. A failing read falls back to demo data.",
    )
    st.session_state["use_mock"] = use_mock
    return use_mock


def render_sidebar(cfg: AppConfig, user_name: Optional[str] = None) -> SidebarState:
    with st.sidebar:
        st.markdown("### 🏅 Meet Admin")
        st.caption(cfg.meet_title.title())

        labels = [l for l, _ in NAV_ITEMS]
        default_label = st.session_state.get("nav_label", labels[0])
        idx = labels.index(default_label) if default_label in labels else 0

        label = st.radio(
            "Nav",
            labels,
            index=idx,
            label_visibility="collapsed",
        )
        st.session_state["nav_label"] = label
        view = dict(NAV_ITEMS)[label]

        with st.expander("🔌 Data source", expanded=False):
            render_data_toggle(cfg)
            st.markdown("**Supabase**")
            st.code(cfg.supabase_url or "(not configured)", language="text")

        sign_out = False
        if user_name:
            st.divider()
            st.caption(f"Signed in as **{user_name}**")
            sign_out = st.button("Sign out", use_container_width=True)
    use_mock = st.session_state.get("use_mock", cfg.default_use_mock)

    return SidebarState(view=view, use_mock=use_mock, sign_out=sign_out)
