from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

CERTIFICATE_TYPES = ("1st", "2nd", "3rd", "participation")
TYPE_LABELS = {
    "1st": "First Place (Merit)",
    "2nd": "Second Place (Merit)",
    "3rd": "Third Place (Merit)",
    "participation": "Participation",
}

COLORS = {
    "gold": "#B8860B",
    "silver": "#757575",
    "bronze": "#A0522D",
    "blue": "#1E88E5",
    "black": "#000000",
    "gray": "#333333",
    "red": "#D32F2F",
}

PLACE_TEXT = {"1st": "First", "2nd": "Second", "3rd": "Third"}


@dataclass
class CertificateOptions:
    type: str
    participant_name: str
    event_name: str
    department_name: str
    register_number: str
    semester: str
    gender: str

    @property
    def is_merit(self) -> bool:
        return self.type in PLACE_TEXT


@dataclass
class Run:
    """A stretch of body text in one style."""
    text: str
    bold: bool = False
    color: Optional[str] = None


@dataclass
class PlacedWord:
    text: str
    bold: bool
    color: Optional[str]
    x: float  # offset from the paragraph's left edge


def theme_color(cert_type: str) -> str:
    return {
        "1st": COLORS["gold"],
        "2nd": COLORS["silver"],
        "3rd": COLORS["bronze"],
        "participation": COLORS["blue"],
    }.get(cert_type, COLORS["black"])


def certificate_title(cert_type: str) -> str:
    return "CERTIFICATE OF PARTICIPATION" if cert_type == "participation" else "CERTIFICATE OF MERIT"


def ordinal(n: int) -> str:
    if 11 <= n % 100 <= 13:
        return f"{n}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def semester_display(semester: str) -> str:
    """
    "5" -> "6th Semester": odd semesters print as the even one of their year.
    Falls back to the raw text when no number can be found.
    """
    raw = str(semester).strip()
    m = re.search(r"(\d+)\D*$", raw)
    if not m:
        return raw
    n = int(m.group(1))
    if n % 2:
        n += 1
    return f"{ordinal(n)} Semester"


def department_display(name: str) -> str:
    return name if name.lower().startswith("department of") else f"Department of {name}"


def honorific(gender: str) -> str:
    return "Mr." if gender.lower() == "male" else "Ms."


def category_display(gender: str) -> str:
    return "Men" if gender.lower() == "male" else "Women"


def body_runs(opts: CertificateOptions, meet_title: str, meet_dates: str) -> list[Run]:
    black = COLORS["black"]
    runs = [
        Run("This is to certify that"),
        Run(f"{honorific(opts.gender)} {opts.participant_name.upper()}", True, black),
        Run(f"(KTU Reg. No. {opts.register_number.upper()}),", True, black),
        Run("of"),
        Run(f"{semester_display(opts.semester)},", True, black),
        Run(f"{department_display(opts.department_name)},", True, black),
    ]
    if opts.is_merit:
        runs += [
            Run("has secured the"),
            Run(f"{PLACE_TEXT[opts.type]} Position", True, theme_color(opts.type)),
            Run("in the"),
        ]
    else:
        runs.append(Run("has successfully participated in the"))
    runs += [
        Run(opts.event_name, True, black),
        Run(f"({category_display(opts.gender)})", True, black),
        Run(f"event held as part of the {meet_title.title()} on {meet_dates}."),
    ]
    return runs


def justify(
    runs: list[Run],
    max_width: float,
    measure: Callable[[str, bool], float],
) -> list[list[PlacedWord]]:
    """
    Break runs into words and lay them out as a justified paragraph.

    Every line but the last is stretched to `max_width`; the last line is
    centred with normal spacing. A newline inside a run forces a break.
    `measure(text, bold)` returns the rendered width in the caller's units.
    """
    space = measure(" ", False)
    lines: list[list[tuple[str, bool, Optional[str], float]]] = []
    current: list[tuple[str, bool, Optional[str], float]] = []
    width = 0.0

    for run in runs:
        for i, part in enumerate(str(run.text).split("\n")):
            if i > 0:
                lines.append(current)
                current, width = [], 0.0
            for word in part.split(" "):
                if not word:
                    continue
                w = measure(word, run.bold)
                needed = w + (space if current else 0.0)
                if current and width + needed > max_width:
                    lines.append(current)
                    current, width, needed = [], 0.0, w
                current.append((word, run.bold, run.color, w))
                width += needed
    if current:
        lines.append(current)

    placed: list[list[PlacedWord]] = []
    for index, line in enumerate(lines):
        total = sum(w for *_, w in line)
        gaps = len(line) - 1
        if index == len(lines) - 1:
            gap = space
            x = (max_width - (total + gaps * space)) / 2
        else:
            gap = (max_width - total) / gaps if gaps > 0 else space
            x = 0.0
        row = []
        for text, bold, color, w in line:
            row.append(PlacedWord(text, bold, color, x))
            x += w + gap
        placed.append(row)
    return placed


def certificate_filename(opts: CertificateOptions) -> str:
    rank_label = "Participation" if opts.type == "participation" else f"{opts.type}_Place"
    clean_name = re.sub(r"[^a-zA-Z0-9]", "_", opts.participant_name)
    return f"Certificate_{rank_label}_{clean_name}.pdf"


def sample_options() -> CertificateOptions:
    """Prefilled values for the preview page."""
    return CertificateOptions(
        type="1st",
        participant_name="Muhammed Arshad N",
        event_name="400m Race",
        department_name="Electronics and Communication Engineering",
        register_number="WYD22EC074",
        semester="5",
        gender="male",
    )
