from __future__ import annotations

import base64
import html
from typing import Optional

import streamlit as st


def _logo_tag(logo: Optional[bytes]) -> str:
    if not logo:
        return ""
    encoded = base64.b64encode(logo).decode("utf-8")
    return f'<img class="meet-logo" src="data:image/png;base64,{encoded}" alt="College logo" />'


def render_header(app_name: str, subtitle: str, right_pill: str, logo: Optional[bytes] = None) -> None:
    """Page banner. `logo` is the college logo from system settings, if one is uploaded."""
    st.markdown(
        f"""
<div class="meet-header">
  <div class="meet-header-left">
    {_logo_tag(logo)}
    <div>
      <div class="meet-title">{html.escape(app_name)}</div>
      <div class="meet-subtitle">{html.escape(subtitle)}</div>
    </div>
  </div>
  <div class="pill"><span class="dot"></span>{html.escape(right_pill)}</div>
</div>
        """,
        unsafe_allow_html=True,
    )
