from __future__ import annotations

from typing import Optional

import streamlit as st

from data.connection import StoreError
from data.records import ValidationError


def report_failure(logger, event: str, error: Exception, message: str, **context) -> None:
    """Log a failed action and show it to the user. Known errors show their own text."""
    logger.error(event, error=str(error), error_type=type(error).__name__, **context)
    if isinstance(error, ValidationError):
        st.error(str(error))
    elif isinstance(error, StoreError):
        st.error(f"{message} {error.message}")
    else:
        st.error(f"{message} Check the logs for details.")


def confirm(key: str, prompt: str, label: str = "Delete") -> bool:
    """
    Two-step destructive action: the first click arms, the second confirms.
    Returns True only on the confirming click.
    """
    armed_key = f"confirm_{key}"
    if not st.session_state.get(armed_key):
        if st.button(label, key=f"{key}_arm"):
            st.session_state[armed_key] = True
            st.rerun()
        return False

    st.warning(prompt)
    c1, c2 = st.columns(2)
    if c1.button(f"Yes, {label.lower()}", key=f"{key}_yes", type="primary"):
        st.session_state[armed_key] = False
        return True
    if c2.button("Cancel", key=f"{key}_no"):
        st.session_state[armed_key] = False
        st.rerun()
    return False


def flash(message: Optional[str] = None) -> None:
    """Queue a success message across st.rerun(), or show the queued one."""
    if message is not None:
        st.session_state["flash"] = message
        return
    queued = st.session_state.pop("flash", None)
    if queued:
        st.success(queued)
