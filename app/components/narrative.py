from __future__ import annotations

import streamlit as st


def render_tab_intro(audience: str, purpose: str, context: str | None = None) -> None:
    """
    Short framing block at the top of a page:
    - who the page is for
    - what it is used to do
    - optional 1-2 line context
    """
    st.markdown(
        f"""
<div class="tab-intro">
  <div class="tab-intro-audience">{audience}</div>
  <div class="tab-intro-purpose">{purpose}</div>
  {f'<div class="tab-intro-context">{context}</div>' if context else ''}
</div>
        """,
        unsafe_allow_html=True,
    )


def render_callout(title: str, body: str, warn: bool = False) -> None:
    cls = "callout callout-warn" if warn else "callout"
    st.markdown(
        f"""
<div class="{cls}">
  <div class="callout-title">{title}</div>
  <div class="callout-body">{body}</div>
</div>
        """,
        unsafe_allow_html=True,
    )


def medal_badge(outcome: str) -> str:
    """HTML badge for `1st`/`2nd`/`3rd`/`participation`."""
    cls, label = {
        "1st": ("medal-gold", "🥇 1st Place"),
        "2nd": ("medal-silver", "🥈 2nd Place"),
        "3rd": ("medal-bronze", "🥉 3rd Place"),
    }.get(outcome, ("medal-participation", "Participation"))
    return f'<span class="medal {cls}">{label}</span>'
