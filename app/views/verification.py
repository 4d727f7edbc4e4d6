"""
Public certificate verification page.

Reached from the QR code printed on every certificate: `/?verify=<register number>`.
No sign-in required.
"""
from __future__ import annotations

import streamlit as st

from components.narrative import medal_badge
from config import AppConfig
from data.connection import RecordNotFound
from data.records import GENDER_LABELS
from data.service import get_participant_record
from logs import get_logger

logger = get_logger("views.verification")


def render(cfg: AppConfig, use_mock: bool, register_number: str) -> None:
    st.title("Certificate verification")
    reg = (register_number or "").strip().upper()

    try:
        res = get_participant_record(cfg, use_mock, reg)
    except RecordNotFound:
        logger.info("verification_not_found", register_number=reg)
        st.error(f"Participant not found: no record for register number **{reg or '(blank)'}**.")
        return
    except Exception as e:
        logger.error("verification_failed", register_number=reg, error=str(e))
        st.error("Verification is unavailable right now. Please try again later.")
        return

    record = res.data
    p = record.participant
    st.success("✅ Verified participant")

    c1, c2, c3 = st.columns(3)
    c1.metric("Name", p.name)
    c2.metric("Register number", p.register_number)
    c3.metric("Chest number", p.chest_number or "-")
    st.markdown(
        f"**Department:** {record.department.name if record.department else 'Unknown'}  \n"
        f"**Semester:** S{p.semester}  \n"
        f"**College:** {cfg.college_name.title()}"
    )

    st.subheader("Events")
    if not record.entries:
        st.info("No event participation recorded yet.")
        return
    for entry in record.entries:
        event = entry.event
        st.markdown(
            f"**{event.name}** ({GENDER_LABELS.get(event.gender, event.gender)}) &nbsp; {medal_badge(entry.outcome)}",
            unsafe_allow_html=True,
        )
