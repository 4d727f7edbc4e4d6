from __future__ import annotations

import time
from dataclasses import replace
from datetime import datetime, timezone

from data import records as R
from logs import get_logger

logger = get_logger("settings")


def get_system_settings(store) -> R.SystemSettings:
    """The `config` row, or blank defaults when it hasn't been saved yet."""
    rows = store.select(R.SETTINGS, eq={"id": R.SETTINGS_ROW_ID})
    if not rows:
        logger.info("system_settings_missing_using_defaults")
        return R.SystemSettings()
    return R.SystemSettings.from_row(rows[0])


def save_system_settings(store, settings: R.SystemSettings) -> None:
    store.upsert(R.SETTINGS, [settings.to_row()])
    logger.info("system_settings_saved")


def asset_path(field: str, filename: str, now_ms: int | None = None) -> str:
    """`<field>_<epoch ms>.<ext>`, keeping the uploaded file's extension."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "png"
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{field}_{stamp}.{ext}"


def upload_asset(
    store,
    bucket: str,
    settings: R.SystemSettings,
    field: str,
    filename: str,
    content: bytes,
    content_type: str = "image/png",
) -> R.SystemSettings:
    """Upload an image and save its public URL into `field` (auto-saves)."""
    if field not in R.IMAGE_FIELDS:
        raise R.ValidationError(f"Unknown image field: {field}")
    if not content:
        raise R.ValidationError("The uploaded file is empty.")
    url = store.upload(bucket, asset_path(field, filename), content, content_type)
    updated = replace(settings, **{field: url})
    save_system_settings(store, updated)
    logger.info("asset_uploaded", field=field, url=url)
    return updated


def remove_asset(store, settings: R.SystemSettings, field: str) -> R.SystemSettings:
    """Clear the URL. The file itself stays in storage."""
    if field not in R.IMAGE_FIELDS:
        raise R.ValidationError(f"Unknown image field: {field}")
    updated = replace(settings, **{field: None})
    save_system_settings(store, updated)
    return updated


def get_site_settings(store) -> R.SiteSettings:
    """Feature flags for the public site; any read failure yields the defaults."""
    settings = R.SiteSettings()
    try:
        rows = store.select(R.SITE_SETTINGS)
    except Exception as e:
        logger.error("site_settings_read_failed", error=str(e))
        return settings
    for row in rows:
        if row.get("key") in R.SiteSettings.keys():
            setattr(settings, row["key"], bool(row.get("value")))
    return settings


def update_site_setting(store, key: str, value: bool) -> None:
    if key not in R.SiteSettings.keys():
        raise R.ValidationError(f"Unknown site setting: {key}")
    store.upsert(
        R.SITE_SETTINGS,
        [{"key": key, "value": bool(value), "updated_at": datetime.now(timezone.utc).isoformat()}],
        on_conflict="key",
    )
    logger.info("site_setting_updated", key=key, value=bool(value))
