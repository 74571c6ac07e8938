"""
progress.py — Legislative progress tracker.

Provides stages_for and compute_progress.

A bill's stage sequence is fixed by its type and chamber of origin. The
stage reached is the furthest milestone found anywhere in the action
history; a later action that looks like an earlier step never lowers it.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from civic.legislative.status import classify, passed_chambers
from civic.legislative.taxonomy import (
    COMMITTEE_REFERRAL_PHRASES,
    COMMITTEE_REPORT_PHRASES,
    ENACTED_PHRASES,
    INTRODUCTION_PHRASES,
    PASSED_CONGRESS_PHRASES,
    PRESIDENT_PHRASES,
    STAGE_ADOPTED,
    STAGE_COMMITTEE,
    STAGE_INTRODUCED,
    STAGE_LAW,
    STAGE_PRESIDENT,
    VOTE_SUFFIX,
    ActionRecord,
    BillTypeDescriptor,
    Chamber,
    ProgressResult,
    ResolutionKind,
    StatusLabel,
    contains_any,
)

log = logging.getLogger(__name__)

# A veto still means the bill reached the President.
_VETO_STAGE_PHRASES = ("vetoed", "pocket veto")


# ---------------------------------------------------------------------------
# Stage sequences
# ---------------------------------------------------------------------------

def _build_stage_table() -> dict[tuple[ResolutionKind, Chamber], tuple[str, ...]]:
    table: dict[tuple[ResolutionKind, Chamber], tuple[str, ...]] = {}
    for origin in (Chamber.HOUSE, Chamber.SENATE):
        first, second = origin.value, origin.other.value
        head = (STAGE_INTRODUCED, STAGE_COMMITTEE)
        table[(ResolutionKind.SIMPLE_RESOLUTION, origin)] = head + (first + VOTE_SUFFIX, STAGE_ADOPTED)
        table[(ResolutionKind.CONCURRENT_RESOLUTION, origin)] = head + (first, second, STAGE_ADOPTED)
        table[(ResolutionKind.BILL, origin)] = head + (first, second, STAGE_PRESIDENT, STAGE_LAW)
        table[(ResolutionKind.JOINT_RESOLUTION, origin)] = head + (first, second, STAGE_PRESIDENT, STAGE_LAW)
    return table


_STAGE_TABLE = _build_stage_table()
DEFAULT_STAGES = _STAGE_TABLE[(ResolutionKind.BILL, Chamber.HOUSE)]


def stages_for(descriptor: Optional[BillTypeDescriptor]) -> tuple[str, ...]:
    """Return the stage sequence for a bill type. Unknown combinations get the House bill sequence."""
    if descriptor is None:
        return DEFAULT_STAGES
    key = (descriptor.resolution_kind, descriptor.chamber_of_origin)
    return _STAGE_TABLE.get(key, DEFAULT_STAGES)


def _stage_index(stages: tuple[str, ...], name: str) -> Optional[int]:
    try:
        return stages.index(name)
    except ValueError:
        return None


def _chamber_stage_index(stages: tuple[str, ...], chamber: Chamber) -> Optional[int]:
    """Index of the chamber's stage, whether named "House" or "HouseVote"."""
    for i, stage in enumerate(stages):
        if stage in (chamber.value, chamber.value + VOTE_SUFFIX):
            return i
    return None


def _passed_congress_index(stages: tuple[str, ...]) -> int:
    president = _stage_index(stages, STAGE_PRESIDENT)
    if president is not None:
        return president - 1
    return len(stages) - 1


# ---------------------------------------------------------------------------
# Milestone matching
# ---------------------------------------------------------------------------

def _passage_stage(
    stages: tuple[str, ...],
    chambers: set[Chamber],
    passed: set[Chamber],
) -> Optional[int]:
    """Stage reached by a chamber passage, given every chamber passed so far.

    A concurrent resolution (both chambers on its track, Adopted next) is
    adopted once both have passed. Otherwise passage lands on the chamber's
    own stage, which is also where a simple resolution's vote stays.
    """
    indexes = [
        i for i in (_chamber_stage_index(stages, c) for c in chambers)
        if i is not None
    ]
    if not indexes:
        return None

    house = _chamber_stage_index(stages, Chamber.HOUSE)
    senate = _chamber_stage_index(stages, Chamber.SENATE)
    if house is not None and senate is not None and passed >= {Chamber.HOUSE, Chamber.SENATE}:
        after = max(house, senate) + 1
        if after < len(stages) and stages[after] == STAGE_ADOPTED:
            return after
    return max(indexes)


def _milestone_stage(
    text: str,
    stages: tuple[str, ...],
    passed: set[Chamber],
) -> Optional[int]:
    """Candidate stage index for one action, or None if it carries no milestone.

    passed accumulates the chambers seen passing so far in the scan.
    """
    t = text.lower()
    if contains_any(t, ENACTED_PHRASES):
        return len(stages) - 1
    if contains_any(t, PRESIDENT_PHRASES) or contains_any(t, _VETO_STAGE_PHRASES):
        return _stage_index(stages, STAGE_PRESIDENT)
    if contains_any(t, PASSED_CONGRESS_PHRASES):
        passed.update((Chamber.HOUSE, Chamber.SENATE))
        return _passed_congress_index(stages)

    chambers = passed_chambers(t)
    if chambers:
        passed.update(chambers)
        return _passage_stage(stages, chambers, passed)

    if contains_any(t, COMMITTEE_REPORT_PHRASES) or contains_any(t, COMMITTEE_REFERRAL_PHRASES):
        return _stage_index(stages, STAGE_COMMITTEE)
    if contains_any(t, INTRODUCTION_PHRASES):
        return 0
    return None


def _label_stage(label: StatusLabel, stages: tuple[str, ...]) -> int:
    """Best stage index for a status label, used when no actions are available."""
    if label is StatusLabel.ENACTED:
        return len(stages) - 1
    if label in (StatusLabel.SENT_TO_PRESIDENT, StatusLabel.VETOED):
        index = _stage_index(stages, STAGE_PRESIDENT)
    elif label is StatusLabel.PASSED_CONGRESS:
        index = _passed_congress_index(stages)
    elif label is StatusLabel.PASSED_HOUSE:
        index = _chamber_stage_index(stages, Chamber.HOUSE)
    elif label is StatusLabel.PASSED_SENATE:
        index = _chamber_stage_index(stages, Chamber.SENATE)
    elif label in (StatusLabel.REPORTED_BY_COMMITTEE, StatusLabel.IN_COMMITTEE):
        index = _stage_index(stages, STAGE_COMMITTEE)
    else:
        index = None
    return index if index is not None else 0


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def compute_progress(
    descriptor: Optional[BillTypeDescriptor],
    actions: Optional[Iterable[ActionRecord]],
    fallback_status_text: Optional[str] = None,
) -> ProgressResult:
    """Place a bill on its progress track.

    Args:
        descriptor:           Bill type and chamber of origin.
        actions:              Full action history, any order.
        fallback_status_text: Status or latest-action text used only when
                              actions is empty.

    Returns:
        ProgressResult with the stage sequence, the furthest stage index
        reached and the percentage along the track. Never raises.
    """
    stages = stages_for(descriptor)
    records = list(actions or [])

    if not records:
        label = classify(fallback_status_text)
        index = _label_stage(label, stages)
        log.debug(f"No actions — fallback status '{label}' → stage {index} ({stages[index]})")
    else:
        index = 0
        passed: set[Chamber] = set()
        for record in sorted(records, key=lambda r: r.timestamp):
            candidate = _milestone_stage(record.text or "", stages, passed)
            if candidate is None:
                continue
            if candidate > index:
                log.debug(f"Stage {candidate} ({stages[candidate]}) ← {(record.text or '')[:100]}")
                index = candidate

    last = len(stages) - 1
    index = min(max(index, 0), last)
    percent = min(100.0, max(0.0, index * 100.0 / last))
    return ProgressResult(stages=stages, current_stage_index=index, percent_complete=percent)
