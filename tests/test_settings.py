"""System settings, branding uploads and public site flags."""

import pytest

from data import records as R
from data import settings as ST


class _BrokenStore:
    def select(self, *args, **kwargs):
        raise RuntimeError("relation does not exist")


class TestSystemSettings:
    def test_defaults_when_row_missing(self, empty_store):
        settings = ST.get_system_settings(empty_store)
        assert settings == R.SystemSettings()

    def test_save_and_reload(self, store):
        current = ST.get_system_settings(store)
        current.college_name = "GEC Wayanad"
        current.hod_name = "Dr. A"
        ST.save_system_settings(store, current)
        assert ST.get_system_settings(store).college_name == "GEC Wayanad"
        assert len(store.select(R.SETTINGS)) == 1

    def test_asset_path_keeps_extension(self):
        assert ST.asset_path("watermark_url", "Logo.JPG", now_ms=1700000000000) == "watermark_url_1700000000000.jpg"
        assert ST.asset_path("hod_signature_url", "scan", now_ms=5) == "hod_signature_url_5.png"

    def test_upload_asset_saves_url(self, store):
        updated = ST.upload_asset(store, "assets", ST.get_system_settings(store), "college_logo_url",
                                  "logo.png", b"\x89PNG...")
        assert updated.college_logo_url.startswith("memory://assets/college_logo_url_")
        assert ST.get_system_settings(store).college_logo_url == updated.college_logo_url
        assert store.files[updated.college_logo_url[len("memory://"):]] == b"\x89PNG..."

    def test_upload_rejects_unknown_field_and_empty_file(self, store):
        current = ST.get_system_settings(store)
        with pytest.raises(R.ValidationError):
            ST.upload_asset(store, "assets", current, "favicon_url", "a.png", b"x")
        with pytest.raises(R.ValidationError):
            ST.upload_asset(store, "assets", current, "watermark_url", "a.png", b"")

    def test_remove_asset_keeps_file(self, store):
        updated = ST.upload_asset(store, "assets", ST.get_system_settings(store), "watermark_url", "w.png", b"img")
        cleared = ST.remove_asset(store, updated, "watermark_url")
        assert cleared.watermark_url is None
        assert ST.get_system_settings(store).watermark_url is None
        assert len(store.files) == 1


class TestSiteSettings:
    def test_seeded_flags(self, store):
        assert ST.get_site_settings(store) == R.SiteSettings(enable_downloads=True, enable_requests=True)

    def test_update_flag(self, store):
        ST.update_site_setting(store, "enable_requests", False)
        assert ST.get_site_settings(store).enable_requests is False
        assert len(store.select(R.SITE_SETTINGS)) == 2
        row = store.select(R.SITE_SETTINGS, eq={"key": "enable_requests"})[0]
        assert row["updated_at"]

    def test_unknown_flag(self, store):
        with pytest.raises(R.ValidationError):
            ST.update_site_setting(store, "enable_voting", True)

    def test_read_failure_yields_defaults(self):
        assert ST.get_site_settings(_BrokenStore()) == R.SiteSettings()

    def test_missing_rows_use_defaults(self, empty_store):
        assert ST.get_site_settings(empty_store) == R.SiteSettings()
