from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


#
# Shared theme tokens
# - Centralized here so CSS (components/styles.py) and Plotly charts agree.
#
THEME = {
    # Backgrounds
    "bg_primary": "#F5F6F8",     # page background
    "bg_secondary": "#FFFFFF",   # sidebar / top surfaces
    "bg_card": "#FFFFFF",       # card surface
    # Accents (track red + navy)
    "accent_primary": "#D32F2F",
    "accent_secondary": "#E57373",
    "navy_900": "#0B1220",
    "navy_800": "#111C33",
    # Text + borders
    "text_primary": "#111827",
    "text_secondary": "rgba(17, 24, 39, 0.72)",
    "border_color": "#E5E7EB",
    "grid": "rgba(17, 24, 39, 0.10)",
    "shadow": "0 1px 3px rgba(16,24,40,0.08)",
    "radius_px": 10,
    # Medal + status colors
    "gold": "#B8860B",
    "silver": "#757575",
    "bronze": "#A0522D",
    "success": "#067647",
    "warning": "#F59E0B",
    "danger": "#B42318",
}


@dataclass(frozen=True)
class AppConfig:
    # Required for live mode (Supabase)
    supabase_url: str
    supabase_key: str

    # Service-role key: needed to create/delete staff auth accounts
    supabase_service_key: Optional[str]

    assets_bucket: str

    # Base URL printed into certificate QR codes (?verify=<register number>)
    public_base_url: str

    # Certificate wording fallbacks when the settings row is empty
    college_name: str
    hod_name: str
    principal_name: str
    issuing_department: str
    meet_title: str
    meet_dates: str

    # Logging
    log_level: str
    log_json: bool

    # Defaults
    default_use_mock: bool

    @property
    def live_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else None


def _getbool(name: str, default: str) -> bool:
    return (_getenv(name, default) or default).lower() in ("1", "true", "yes", "on")


def get_config() -> AppConfig:
    """
    Centralized config: this is the ONLY place env vars are read.
    - Loads `.env` if present (local dev)
    - Everything has a default so demo mode works with an empty environment
    """
    load_dotenv(override=False)

    return AppConfig(
        supabase_url=_getenv("SUPABASE_URL") or "",
        supabase_key=_getenv("SUPABASE_KEY") or "",
        supabase_service_key=_getenv("SUPABASE_SERVICE_KEY"),
        assets_bucket=_getenv("ASSETS_BUCKET", "assets") or "assets",
        public_base_url=_getenv("PUBLIC_BASE_URL", "http://localhost:8501") or "http://localhost:8501",
        college_name=_getenv("COLLEGE_NAME", "GOVERNMENT ENGINEERING COLLEGE WAYANAD") or "",
        hod_name=_getenv("HOD_NAME", "Dr. Joly Thomas") or "",
        principal_name=_getenv("PRINCIPAL_NAME", "Dr. Pradeep V") or "",
        issuing_department=_getenv("ISSUING_DEPARTMENT", "DEPARTMENT OF PHYSICAL EDUCATION") or "",
        meet_title=_getenv("MEET_TITLE", "ANNUAL SPORTS MEET 2025-26") or "",
        meet_dates=_getenv("MEET_DATES", "10th & 11th February 2026") or "",
        log_level=(_getenv("LOG_LEVEL", "INFO") or "INFO").upper(),
        log_json=_getbool("LOG_JSON", "false"),
        default_use_mock=_getbool("USE_MOCK_DATA", "true"),
    )
