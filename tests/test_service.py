"""Read fallback, store selection, error mapping and config parsing."""

import pytest
from postgrest.exceptions import APIError

import config as config_module
from config import get_config
from data import service
from data.connection import (
    DuplicateRecordError,
    RecordNotFound,
    StoreAuthError,
    StoreError,
    SupabaseStore,
    _api_error,
    get_store,
)
from data.mock_data import MemoryStore, get_demo_store


class TestFallback:
    def test_demo_mode_reads_demo_store(self, cfg):
        res = service.get_programs(cfg, use_mock=True)
        assert res.source == "mock"
        assert res.warning is None
        assert {p.id for p in res.data} >= {"prog-2025", "prog-2026"}

    def test_unconfigured_live_mode_falls_back_with_warning(self, cfg):
        res = service.get_standings(cfg, use_mock=False)
        assert res.source == "mock"
        assert res.warning == "Fell back to demo data: StoreAuthError"
        assert not res.data.departments.empty

    def test_not_found_is_not_masked(self, cfg):
        with pytest.raises(RecordNotFound):
            service.get_participant_record(cfg, use_mock=True, register_number="NOPE")

    def test_live_verification_never_uses_demo_data(self, cfg):
        register_number = get_demo_store().select("participants")[0]["register_number"]
        with pytest.raises(StoreAuthError):
            service.get_participant_record(cfg, use_mock=False, register_number=register_number)

    def test_demo_verification(self, cfg):
        register_number = get_demo_store().select("participants")[0]["register_number"]
        res = service.get_participant_record(cfg, use_mock=True, register_number=register_number)
        assert res.source == "mock"
        assert res.data.participant.register_number == register_number

    def test_branding(self, cfg):
        branding = service.get_branding(cfg, use_mock=True).data
        assert branding.verification_base == cfg.public_base_url

    def test_college_logo_from_settings(self, cfg, monkeypatch, store):
        monkeypatch.setattr(service, "get_demo_store", lambda: store)
        assert service.get_college_logo(cfg, use_mock=True).data is None
        store.files["assets/logo.png"] = b"\x89PNG"
        store.update("settings", {"college_logo_url": "memory://assets/logo.png"}, eq={"id": "config"})
        assert service.get_college_logo(cfg, use_mock=True).data == b"\x89PNG"

    def test_writer_picks_store(self, cfg):
        assert service.writer(cfg, use_mock=True) is get_demo_store()
        assert isinstance(service.writer(cfg, use_mock=False), SupabaseStore)
        assert isinstance(get_store(cfg, True), MemoryStore)


class TestSupabaseStore:
    def test_requires_credentials(self, cfg):
        with pytest.raises(StoreAuthError):
            SupabaseStore(cfg=cfg).select("programs")

    def test_refuses_unfiltered_writes(self, cfg):
        store = SupabaseStore(cfg=cfg)
        with pytest.raises(StoreError):
            store.update("programs", {"status": "ended"})
        with pytest.raises(StoreError):
            store.delete("programs")

    def test_staff_accounts_need_service_key(self, cfg):
        with pytest.raises(StoreAuthError):
            SupabaseStore(cfg=cfg).create_auth_user("a@b.c", "pw")

    def test_api_error_mapping(self):
        dup = _api_error("insert", "participants", APIError({"code": "23505", "message": "duplicate key"}))
        assert isinstance(dup, DuplicateRecordError)
        assert dup.code == "23505"
        other = _api_error("select", "events", APIError({"code": "42P01", "message": "relation missing"}))
        assert type(other) is StoreError
        assert other.message == "select on events failed: relation missing"


class TestMemoryStore:
    def test_unique_columns(self, store):
        row = store.select("participants")[0]
        with pytest.raises(DuplicateRecordError):
            store.insert("participants", [{**row, "id": "new"}])

    def test_select_returns_copies(self, store):
        store.select("events")[0]["participants"].append("intruder")
        assert all("intruder" not in e["participants"] for e in store.select("events"))

    def test_upload_conflict(self, empty_store):
        empty_store.upload("assets", "a.png", b"1", "image/png")
        with pytest.raises(StoreError):
            empty_store.upload("assets", "a.png", b"2", "image/png")


ENV_VARS = [
    "SUPABASE_URL", "SUPABASE_KEY", "SUPABASE_SERVICE_KEY", "ASSETS_BUCKET", "PUBLIC_BASE_URL",
    "COLLEGE_NAME", "HOD_NAME", "PRINCIPAL_NAME", "ISSUING_DEPARTMENT", "MEET_TITLE", "MEET_DATES",
    "LOG_LEVEL", "LOG_JSON", "USE_MOCK_DATA",
]


class TestConfig:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ENV_VARS:
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setattr(config_module, "load_dotenv", lambda **kwargs: False)

    def test_defaults(self):
        cfg = get_config()
        assert cfg.default_use_mock is True
        assert cfg.live_configured is False
        assert cfg.assets_bucket == "assets"
        assert cfg.log_level == "INFO"
        assert cfg.college_name == "GOVERNMENT ENGINEERING COLLEGE WAYANAD"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://x.supabase.co")
        monkeypatch.setenv("SUPABASE_KEY", "anon")
        monkeypatch.setenv("USE_MOCK_DATA", "false")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("PUBLIC_BASE_URL", "https://meet.example.org/")
        cfg = get_config()
        assert cfg.live_configured is True
        assert cfg.default_use_mock is False
        assert cfg.log_level == "DEBUG"
        assert cfg.public_base_url == "https://meet.example.org/"

    def test_blank_values_use_defaults(self, monkeypatch):
        monkeypatch.setenv("ASSETS_BUCKET", "   ")
        assert get_config().assets_bucket == "assets"
