from __future__ import annotations

from dataclasses import replace

import streamlit as st

from certificates.generator import load_image
from components.feedback import flash, report_failure
from components.narrative import render_tab_intro
from config import AppConfig
from data.records import IMAGE_FIELDS, SystemSettings
from data.service import get_system_settings, writer
from data.settings import remove_asset, save_system_settings, upload_asset
from logs import get_logger

logger = get_logger("views.settings")


def _render_text_fields(cfg: AppConfig, use_mock: bool, current: SystemSettings) -> None:
    st.subheader("Certificate signatories")
    with st.form("system_settings"):
        college = st.text_input("College name", value=current.college_name, placeholder=cfg.college_name)
        c1, c2 = st.columns(2)
        hod = c1.text_input("HOD name", value=current.hod_name, placeholder=cfg.hod_name)
        principal = c2.text_input("Principal name", value=current.principal_name, placeholder=cfg.principal_name)
        saved = st.form_submit_button("Save settings")
    if not saved:
        return
    updated = replace(current, college_name=college.strip(), hod_name=hod.strip(), principal_name=principal.strip())
    try:
        save_system_settings(writer(cfg, use_mock), updated)
    except Exception as e:
        report_failure(logger, "system_settings_save_failed", e, "Couldn't save the settings.")
        return
    flash("Settings saved.")
    st.rerun()


def _render_image(cfg: AppConfig, use_mock: bool, current: SystemSettings, field: str, label: str) -> None:
    store = writer(cfg, use_mock)
    url = getattr(current, field)
    st.markdown(f"**{label}**")
    if url:
        data = load_image(url, store=store)
        if data:
            st.image(data, width=160)
        else:
            st.caption("Couldn't load the current image.")
        if st.button("Remove", key=f"remove_{field}"):
            try:
                remove_asset(store, current, field)
            except Exception as e:
                report_failure(logger, "asset_remove_failed", e, "Couldn't remove the image.", field=field)
                return
            flash(f"{label} removed.")
            st.rerun()
    else:
        st.caption("Not set. Certificates fall back to the bundled image, if any.")

    upload = st.file_uploader(f"Upload {label.lower()}", type=["png", "jpg", "jpeg"], key=f"upload_{field}",
                              label_visibility="collapsed")
    if upload is not None and st.button("Upload", key=f"do_upload_{field}"):
        try:
            upload_asset(store, cfg.assets_bucket, current, field, upload.name, upload.getvalue(),
                         upload.type or "image/png")
        except Exception as e:
            report_failure(logger, "asset_upload_failed", e, "Upload failed.", field=field)
            return
        flash(f"{label} uploaded.")
        st.rerun()


def render(cfg: AppConfig, use_mock: bool) -> None:
    st.title("Settings")
    render_tab_intro(
        audience="Meet administrators",
        purpose="Names and images printed on every certificate.",
        context="Uploads are saved immediately. Empty fields fall back to the defaults from the environment.",
    )
    flash()

    res = get_system_settings(cfg, use_mock)
    if res.warning:
        st.warning(res.warning)
    current = res.data

    _render_text_fields(cfg, use_mock, current)

    st.subheader("Branding images")
    fields = list(IMAGE_FIELDS.items())
    for start in range(0, len(fields), 3):
        cols = st.columns(3)
        for col, (field, label) in zip(cols, fields[start:start + 3]):
            with col:
                _render_image(cfg, use_mock, current, field, label)
