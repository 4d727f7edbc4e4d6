"""
Record types for the meet database.

Rows are stored verbatim with snake_case columns; `from_row` tolerates missing
columns so older rows still load.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


# Table names
STAFF = "staff"
DEPARTMENTS = "departments"
BATCHES = "batches"
PARTICIPANTS = "participants"
PROGRAMS = "programs"
EVENTS = "events"
TEAMS = "teams"
REQUESTS = "participation_requests"
SETTINGS = "settings"
SITE_SETTINGS = "site_settings"

STAFF_TYPES = ("ontrack", "offtrack")
GENDERS = ("male", "female")
EVENT_GENDERS = ("male", "female", "mixed")
EVENT_TYPES = ("individual", "group")
PROGRAM_CATEGORIES = ("department", "semester", "mixed")
PROGRAM_STATUSES = ("active", "inactive", "ended")

DEFAULT_TEAM_SIZE = 4
DEFAULT_POINTS = {
    "individual": (5, 3, 1),
    "group": (10, 6, 4),
}
SETTINGS_ROW_ID = "config"

GENDER_LABELS = {"male": "Men", "female": "Women", "mixed": "Mixed"}


class ValidationError(ValueError):
    """Raised when form input is missing or malformed."""


def require(**fields: Any) -> None:
    missing = [name for name, value in fields.items() if value is None or not str(value).strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}.")


def semester_group(semester: int) -> str:
    if semester <= 2:
        return "S1/S2"
    if semester <= 4:
        return "S3/S4"
    if semester <= 6:
        return "S5/S6"
    return "S7/S8"


def _int(v: Any, default: int = 0) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


@dataclass
class StaffProfile:
    uid: str
    email: str
    name: str
    role: str = "staff"
    staff_type: Optional[str] = None
    phone: Optional[str] = None
    assigned_event_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "StaffProfile":
        return cls(
            uid=row["uid"],
            email=row.get("email") or "",
            name=row.get("name") or "",
            role=row.get("role") or "staff",
            staff_type=row.get("staff_type"),
            phone=row.get("phone"),
            assigned_event_id=row.get("assigned_event_id"),
        )

    def to_row(self) -> dict:
        return asdict(self)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass
class Department:
    id: str
    name: str
    code: str
    total_points: int = 0
    medal_count: dict = field(default_factory=lambda: {"gold": 0, "silver": 0, "bronze": 0})

    @classmethod
    def from_row(cls, row: dict) -> "Department":
        return cls(
            id=row["id"],
            name=row.get("name") or "",
            code=row.get("code") or "",
            total_points=_int(row.get("total_points")),
            medal_count=dict(row.get("medal_count") or {"gold": 0, "silver": 0, "bronze": 0}),
        )

    def to_row(self) -> dict:
        return asdict(self)


@dataclass
class Batch:
    id: str
    name: str
    department_id: str

    @classmethod
    def from_row(cls, row: dict) -> "Batch":
        return cls(id=row["id"], name=row.get("name") or "", department_id=row.get("department_id") or "")

    def to_row(self) -> dict:
        return asdict(self)


@dataclass
class Participant:
    id: str
    register_number: str
    name: str
    department_id: str
    batch_id: Optional[str]
    semester: int
    gender: str
    chest_number: str
    total_points: int = 0
    individual_wins: int = 0

    @classmethod
    def from_row(cls, row: dict) -> "Participant":
        return cls(
            id=row["id"],
            register_number=row.get("register_number") or "",
            name=row.get("name") or "",
            department_id=row.get("department_id") or "",
            batch_id=row.get("batch_id"),
            semester=_int(row.get("semester"), 1),
            gender=row.get("gender") or "male",
            chest_number=str(row.get("chest_number") or ""),
            total_points=_int(row.get("total_points")),
            individual_wins=_int(row.get("individual_wins")),
        )

    def to_row(self) -> dict:
        return asdict(self)


@dataclass
class RegistrationData:
    name: str
    register_number: str
    department_id: str
    gender: str
    semester: int
    batch_id: Optional[str] = None


@dataclass
class Program:
    id: str
    name: str
    category: str = "department"
    status: str = "inactive"
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "Program":
        return cls(
            id=row["id"],
            name=row.get("name") or "",
            category=row.get("category") or "department",
            status=row.get("status") or "inactive",
            created_at=row.get("created_at"),
        )

    def to_row(self) -> dict:
        return asdict(self)


@dataclass
class RoundResult:
    participant_id: str
    qualified: bool = False
    score: Any = None
    rank: Optional[int] = None
    set: Optional[int] = None

    @classmethod
    def from_row(cls, row: dict) -> "RoundResult":
        rank = row.get("rank")
        return cls(
            participant_id=row.get("participant_id") or row.get("participantId") or "",
            qualified=bool(row.get("qualified", False)),
            score=row.get("score"),
            rank=_int(rank) if rank not in (None, "") else None,
            set=row.get("set"),
        )


@dataclass
class Round:
    id: str
    name: str
    sequence: int = 1
    status: str = "pending"
    participants: list[RoundResult] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: dict) -> "Round":
        return cls(
            id=row.get("id") or "",
            name=row.get("name") or "",
            sequence=_int(row.get("sequence"), 1),
            status=row.get("status") or "pending",
            participants=[RoundResult.from_row(p) for p in row.get("participants") or []],
        )


@dataclass
class Event:
    id: str
    name: str
    type: str = "individual"
    gender: str = "male"
    status: str = "upcoming"
    program_id: Optional[str] = None
    rounds: list[Round] = field(default_factory=list)
    current_round_index: int = 0
    participants: list[str] = field(default_factory=list)
    team_size: Optional[int] = None
    points_1st: Optional[int] = None
    points_2nd: Optional[int] = None
    points_3rd: Optional[int] = None
    assigned_staff_id: Optional[str] = None
    winner_ids: list[str] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: dict) -> "Event":
        return cls(
            id=row["id"],
            name=row.get("name") or "",
            type=row.get("type") or "individual",
            gender=row.get("gender") or "male",
            status=row.get("status") or "upcoming",
            program_id=row.get("program_id"),
            rounds=[Round.from_row(r) for r in row.get("rounds") or []],
            current_round_index=_int(row.get("current_round_index")),
            participants=list(row.get("participants") or []),
            team_size=row.get("team_size"),
            points_1st=row.get("points_1st"),
            points_2nd=row.get("points_2nd"),
            points_3rd=row.get("points_3rd"),
            assigned_staff_id=row.get("assigned_staff_id"),
            winner_ids=list(row.get("winner_ids") or []),
        )

    def to_row(self) -> dict:
        return asdict(self)

    def points_for_rank(self, rank: int) -> int:
        defaults = DEFAULT_POINTS["individual"]
        if rank == 1:
            return self.points_1st or defaults[0]
        if rank == 2:
            return self.points_2nd or defaults[1]
        if rank == 3:
            return self.points_3rd or defaults[2]
        return 0


@dataclass
class Team:
    id: str
    name: str
    event_id: str
    department_id: Optional[str] = None
    member_ids: list[str] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: dict) -> "Team":
        return cls(
            id=row["id"],
            name=row.get("name") or "",
            event_id=row.get("event_id") or "",
            department_id=row.get("department_id"),
            member_ids=list(row.get("member_ids") or []),
        )


@dataclass
class ParticipationRequest:
    id: str
    participant_id: str
    event_id: str
    status: str = "pending"
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "ParticipationRequest":
        return cls(
            id=row["id"],
            participant_id=row.get("participant_id") or "",
            event_id=row.get("event_id") or "",
            status=row.get("status") or "pending",
            created_at=row.get("created_at"),
        )


IMAGE_FIELDS = {
    "college_logo_url": "College Logo",
    "company_logo_url": "Company/Sponsor Logo",
    "watermark_url": "Watermark",
    "hod_signature_url": "HOD Signature",
    "principal_signature_url": "Principal Signature",
}


@dataclass
class SystemSettings:
    id: str = SETTINGS_ROW_ID
    college_name: str = ""
    hod_name: str = ""
    principal_name: str = ""
    college_logo_url: Optional[str] = None
    company_logo_url: Optional[str] = None
    watermark_url: Optional[str] = None
    principal_signature_url: Optional[str] = None
    hod_signature_url: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "SystemSettings":
        known = {k: row.get(k) for k in cls.__dataclass_fields__ if k in row}
        for text_field in ("college_name", "hod_name", "principal_name"):
            if known.get(text_field) is None:
                known[text_field] = ""
        known["id"] = SETTINGS_ROW_ID
        return cls(**known)

    def to_row(self) -> dict:
        return asdict(self)


@dataclass
class SiteSettings:
    enable_downloads: bool = True
    enable_requests: bool = True

    @classmethod
    def keys(cls) -> tuple[str, ...]:
        return tuple(cls.__dataclass_fields__)
