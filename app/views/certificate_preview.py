from __future__ import annotations

import base64
from dataclasses import replace

import streamlit as st
import streamlit.components.v1 as components

from certificates.generator import render_certificate
from certificates.layout import CERTIFICATE_TYPES, TYPE_LABELS, CertificateOptions, certificate_filename, sample_options
from components.feedback import report_failure
from components.narrative import render_tab_intro
from config import AppConfig
from data.records import GENDERS
from data.service import get_branding, get_participants
from logs import get_logger

logger = get_logger("views.certificates")

FORM_KEY = "certificate_form"


def _fill_from_participant(cfg: AppConfig, use_mock: bool) -> None:
    res = get_participants(cfg, use_mock)
    people = res.data
    if people.empty:
        return
    labels = {"": "(sample data)", **{r["id"]: f"{r['name']} ({r['register_number']})" for _, r in people.iterrows()}}
    pid = st.selectbox("Fill from participant", list(labels), format_func=labels.get)
    if not pid or st.session_state.get("certificate_filled_from") == pid:
        return
    row = people[people["id"] == pid].iloc[0]
    current = st.session_state[FORM_KEY]
    st.session_state[FORM_KEY] = replace(
        current,
        participant_name=row["name"],
        department_name=row["department"],
        register_number=row["register_number"],
        semester=str(row["semester"]),
        gender=row["gender"],
    )
    st.session_state["certificate_filled_from"] = pid


def _controls() -> CertificateOptions:
    opts: CertificateOptions = st.session_state[FORM_KEY]
    with st.form("certificate_controls"):
        cert_type = st.selectbox("Certificate type", CERTIFICATE_TYPES, index=CERTIFICATE_TYPES.index(opts.type),
                                 format_func=TYPE_LABELS.get)
        name = st.text_input("Participant name", value=opts.participant_name)
        reg = st.text_input("Register number", value=opts.register_number)
        event = st.text_input("Event name", value=opts.event_name)
        dept = st.text_input("Department", value=opts.department_name)
        c1, c2 = st.columns(2)
        semester = c1.text_input("Semester", value=opts.semester)
        gender = c2.selectbox("Gender", GENDERS, index=GENDERS.index(opts.gender) if opts.gender in GENDERS else 0)
        if st.form_submit_button("🔄 Update preview", use_container_width=True):
            opts = CertificateOptions(cert_type, name, event, dept, reg, semester, gender)
            st.session_state[FORM_KEY] = opts
    return opts


def _render_pdf(opts: CertificateOptions, cfg: AppConfig, use_mock: bool) -> bytes:
    res = get_branding(cfg, use_mock)
    if res.warning:
        st.warning(res.warning)
    return render_certificate(opts, res.data)


def render(cfg: AppConfig, use_mock: bool) -> None:
    st.title("Certificate preview")
    render_tab_intro(
        audience="Meet administrators",
        purpose="Check the certificate layout before participants download theirs.",
        context="Names and images come from Settings. The QR code links to the public verification page.",
    )
    st.session_state.setdefault(FORM_KEY, sample_options())

    left, right = st.columns([1, 2])
    with left:
        _fill_from_participant(cfg, use_mock)
        opts = _controls()

    with right:
        try:
            pdf = _render_pdf(opts, cfg, use_mock)
        except Exception as e:
            report_failure(logger, "certificate_render_failed", e, "Couldn't generate the certificate.",
                           register_number=opts.register_number)
            return
        st.download_button(
            "⬇️ Download PDF",
            data=pdf,
            file_name=certificate_filename(opts),
            mime="application/pdf",
            use_container_width=True,
        )
        b64 = base64.b64encode(pdf).decode("utf-8")
        components.html(
            f'<iframe src="data:application/pdf;base64,{b64}#toolbar=0" width="100%" height="620" '
            f'style="border:1px solid #E5E7EB; border-radius:10px;"></iframe>',
            height=640,
        )
