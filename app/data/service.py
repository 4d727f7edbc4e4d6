from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from certificates.generator import build_branding, load_image
from config import AppConfig
from data import events, participants, participation, programs, resources, settings, staff, standings
from data.connection import RecordNotFound, SupabaseStore, get_store
from data.mock_data import get_demo_store
from data.records import ValidationError
from logs import get_logger

logger = get_logger("service")


@dataclass(frozen=True)
class DataResult:
    data: Any
    source: str  # "mock" | "supabase"
    warning: str | None = None


def _fallback(use_mock: bool, cfg: AppConfig, read: Callable[[Any], Any]) -> DataResult:
    """
    Run `read` against the live store; on any failure re-run it against the
    demo store and attach a warning for the page to show.
    """
    if use_mock:
        return DataResult(data=read(get_demo_store()), source="mock")
    try:
        return DataResult(data=read(SupabaseStore(cfg=cfg)), source="supabase")
    except (RecordNotFound, ValidationError):
        raise
    except Exception as e:
        logger.warning("live_read_failed_using_demo_data", read=getattr(read, "__name__", "read"), error=str(e))
        return DataResult(
            data=read(get_demo_store()),
            source="mock",
            warning=f"Fell back to demo data: {type(e).__name__}",
        )


def writer(cfg: AppConfig, use_mock: bool):
    """Store for mutations. Writes never fall back to demo data."""
    return get_store(cfg, use_mock)


def get_programs(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _fallback(use_mock, cfg, programs.list_programs)


def get_events(cfg: AppConfig, use_mock: bool, program_id: str | None) -> DataResult:
    return _fallback(use_mock, cfg, lambda store: events.list_events(store, program_id))


def get_participant_record(cfg: AppConfig, use_mock: bool, register_number: str) -> DataResult:
    """
    Certificate verification. Live mode never falls back: confirming a
    register number against demo data would vouch for a made-up person.
    """
    if use_mock:
        return DataResult(data=standings.participant_record(get_demo_store(), register_number), source="mock")
    return DataResult(data=standings.participant_record(SupabaseStore(cfg=cfg), register_number), source="supabase")


def get_departments(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _fallback(use_mock, cfg, resources.list_departments)


def get_batches(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _fallback(use_mock, cfg, resources.list_batches)


def get_participants(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _fallback(use_mock, cfg, participants.list_participants)


def get_staff(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _fallback(use_mock, cfg, staff.list_staff)


def get_pending_requests(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _fallback(use_mock, cfg, participation.list_pending_requests)


def get_request_events(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _fallback(use_mock, cfg, participation.request_events)


def get_standings(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _fallback(use_mock, cfg, standings.load_standings)


def get_system_settings(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _fallback(use_mock, cfg, settings.get_system_settings)


def get_site_settings(cfg: AppConfig, use_mock: bool) -> DataResult:
    return _fallback(use_mock, cfg, settings.get_site_settings)


def get_branding(cfg: AppConfig, use_mock: bool) -> DataResult:
    """Certificate branding: settings row, config fallbacks, and fetched images."""
    return _fallback(use_mock, cfg, lambda store: build_branding(settings.get_system_settings(store), cfg, store))


def get_event_roster(cfg: AppConfig, use_mock: bool, event) -> DataResult:
    return _fallback(use_mock, cfg, lambda store: events.event_roster(store, event))


def get_college_logo(cfg: AppConfig, use_mock: bool) -> DataResult:
    """College logo bytes for the page header, or None when none is uploaded."""
    return _fallback(use_mock, cfg, lambda store: load_image(settings.get_system_settings(store).college_logo_url, store))
