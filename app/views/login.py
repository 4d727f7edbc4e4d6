from __future__ import annotations

from typing import Optional

import streamlit as st

from components.feedback import report_failure
from components.sidebar import render_data_toggle
from config import AppConfig
from data.connection import StoreAuthError
from data.records import StaffProfile
from data.service import writer
from data.staff import authenticate
from logs import get_logger

logger = get_logger("views.login")

SESSION_KEY = "profile"


def current_profile() -> Optional[StaffProfile]:
    return st.session_state.get(SESSION_KEY)


def sign_out(cfg: AppConfig, use_mock: bool) -> None:
    writer(cfg, use_mock).sign_out()
    st.session_state.pop(SESSION_KEY, None)
    logger.info("signed_out")


def render(cfg: AppConfig, use_mock: bool) -> None:
    _, mid, _ = st.columns([1, 2, 1])
    with mid:
        st.title("Admin sign in")
        st.caption("Only administrator accounts can open the console.")
        use_mock = render_data_toggle(cfg)
        if use_mock:
            st.info("Demo data is on. Try admin@sports.com / admin123.")

        with st.form("login"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in", use_container_width=True)

        if not submitted:
            return
        try:
            profile = authenticate(writer(cfg, use_mock), email, password)
        except StoreAuthError as e:
            logger.warning("sign_in_rejected", email=email, reason=e.message)
            st.error(e.message)
            return
        except Exception as e:
            report_failure(logger, "sign_in_failed", e, "Sign-in failed.", email=email)
            return
        st.session_state[SESSION_KEY] = profile
        st.rerun()
