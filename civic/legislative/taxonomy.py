"""
taxonomy.py — Shared types and milestone phrase tables.

Provides StatusLabel, Chamber, ResolutionKind, ActionRecord,
BillTypeDescriptor, ProgressResult and the phrase tuples that both the
status classifier and the progress tracker match against.

All tables are immutable tuples; nothing here is mutated at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Union

from dateutil import parser as dateparser


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class StatusLabel(str, Enum):
    """Normalized bill status, as shown on badges."""

    INTRODUCED            = "Introduced"
    IN_COMMITTEE          = "In Committee"
    REPORTED_BY_COMMITTEE = "Reported by Committee"
    PASSED_HOUSE          = "Passed House"
    PASSED_SENATE         = "Passed Senate"
    PASSED_CONGRESS       = "Passed Congress"
    SENT_TO_PRESIDENT     = "Sent to President"
    ENACTED               = "Enacted"
    VETOED                = "Vetoed"
    UNDER_CONSIDERATION   = "Under Consideration"
    AGREED_TO             = "Agreed To"
    IN_PROGRESS           = "In Progress"
    UNCLASSIFIED          = "Unclassified"

    def __str__(self) -> str:
        return self.value


class Chamber(str, Enum):
    HOUSE   = "House"
    SENATE  = "Senate"
    UNKNOWN = "Unknown"

    @property
    def other(self) -> "Chamber":
        if self is Chamber.HOUSE:
            return Chamber.SENATE
        if self is Chamber.SENATE:
            return Chamber.HOUSE
        return Chamber.UNKNOWN


class ResolutionKind(str, Enum):
    BILL                  = "bill"
    SIMPLE_RESOLUTION     = "simple_resolution"
    CONCURRENT_RESOLUTION = "concurrent_resolution"
    JOINT_RESOLUTION      = "joint_resolution"


# Labels that carry no milestone information.
WEAK_LABELS = frozenset({StatusLabel.IN_PROGRESS, StatusLabel.UNCLASSIFIED})


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ActionRecord:
    """One recorded legislative action."""

    date: Union[str, date, None]
    text: str

    @property
    def key(self) -> tuple[str, str]:
        """Identity used for de-duplication: (date, normalized text)."""
        return (str(self.date or ""), (self.text or "").strip().lower())

    @property
    def timestamp(self) -> datetime:
        """Naive UTC datetime for sorting. Missing or malformed dates sort first.

        An aware date that falls outside the datetime range once shifted to
        UTC (e.g. "0001-01-01T00:00:00+05:00") counts as malformed.
        """
        value = self.date
        if isinstance(value, datetime):
            dt = value
        elif isinstance(value, date):
            return datetime.combine(value, datetime.min.time())
        elif not value:
            return datetime.min
        else:
            try:
                dt = dateparser.parse(str(value))
            except (ValueError, OverflowError):
                return datetime.min
        if dt.tzinfo is None:
            return dt
        try:
            return dt.astimezone(timezone.utc).replace(tzinfo=None)
        except (ValueError, OverflowError):
            return datetime.min


@dataclass(frozen=True)
class BillTypeDescriptor:
    chamber_of_origin: Chamber = Chamber.UNKNOWN
    resolution_kind: ResolutionKind = ResolutionKind.BILL


@dataclass(frozen=True)
class ProgressResult:
    stages: tuple[str, ...]
    current_stage_index: int
    percent_complete: float

    @property
    def current_stage(self) -> str:
        return self.stages[self.current_stage_index]

    def to_dict(self) -> dict:
        return {
            "stages":              list(self.stages),
            "current_stage_index": self.current_stage_index,
            "current_stage":       self.current_stage,
            "percent_complete":    self.percent_complete,
        }


# ---------------------------------------------------------------------------
# Stage names
# ---------------------------------------------------------------------------

STAGE_INTRODUCED = "Introduced"
STAGE_COMMITTEE  = "Committee"
STAGE_PRESIDENT  = "President"
STAGE_LAW        = "Law"
STAGE_ADOPTED    = "Adopted"
VOTE_SUFFIX      = "Vote"


# ---------------------------------------------------------------------------
# Milestone phrases (matched against lower-cased text)
# ---------------------------------------------------------------------------

ENACTED_PHRASES = ("became public law", "signed by president", "enacted")

PRESIDENT_PHRASES = (
    "presented to president",
    "sent to president",
    "placed on president",
)

VETO_PHRASES = ("vetoed", "pocket veto", "returned to")

PASSED_CONGRESS_PHRASES = ("passed congress",)

HOUSE_PASSAGE_PHRASES = (
    "passed house",
    "house passed",
    "agreed to in house",
    "house agreed to",
)

SENATE_PASSAGE_PHRASES = (
    "passed senate",
    "senate passed",
    "agreed to in senate",
    "senate agreed to",
)

PASSAGE_PHRASES = {
    Chamber.HOUSE:  HOUSE_PASSAGE_PHRASES,
    Chamber.SENATE: SENATE_PASSAGE_PHRASES,
}

COMMITTEE_REPORT_PHRASES = (
    "reported by committee",
    "committee agreed",
    "ordered to be reported",
)

COMMITTEE_REFERRAL_PHRASES = (
    "referred to committee",
    "referred to the committee",
    "committee consideration",
    "committee referral",
)

CONSIDERATION_PHRASES = ("considered", "debated", "under consideration")

INTRODUCTION_PHRASES = ("introduced", "received in", "read the first time")

# Unmatched text longer than this is reported as In Progress.
SHORT_TEXT_LIMIT = 30


def contains_any(text: str, phrases: tuple[str, ...]) -> bool:
    """True if any phrase occurs in text (text must already be lower-cased)."""
    return any(p in text for p in phrases)
