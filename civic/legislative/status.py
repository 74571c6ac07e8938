"""
status.py — Status classifier for legislative action text.

Provides classify, classify_history, passed_chambers and the mode names
STRICT and LOOSE.

Every screen that shows a status badge calls the same classifier; the
call site picks a phrase-set mode instead of carrying its own copy:

  strict — bill detail and list cards. Short text that matches no rule is
           reported as Unclassified.
  loose  — search results. Also accepts looser chamber-passage phrasing,
           treats any committee mention as In Committee, and never returns
           Unclassified.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from civic.legislative.taxonomy import (
    COMMITTEE_REFERRAL_PHRASES,
    COMMITTEE_REPORT_PHRASES,
    CONSIDERATION_PHRASES,
    ENACTED_PHRASES,
    INTRODUCTION_PHRASES,
    PASSAGE_PHRASES,
    PASSED_CONGRESS_PHRASES,
    PRESIDENT_PHRASES,
    SHORT_TEXT_LIMIT,
    VETO_PHRASES,
    WEAK_LABELS,
    ActionRecord,
    Chamber,
    StatusLabel,
    contains_any,
)

log = logging.getLogger(__name__)

STRICT = "strict"
LOOSE  = "loose"
MODES  = (STRICT, LOOSE)
DEFAULT_MODE = STRICT


def _resolve_mode(mode: Optional[str]) -> str:
    name = (mode or DEFAULT_MODE).strip().lower()
    if name not in MODES:
        log.warning(f"Unknown classifier mode '{mode}'. Falling back to '{DEFAULT_MODE}'.")
        return DEFAULT_MODE
    return name


# ---------------------------------------------------------------------------
# Chamber passage
# ---------------------------------------------------------------------------

def passed_chambers(text: str, loose: bool = False) -> set[Chamber]:
    """Return the chambers whose passage is reported in text.

    text must already be lower-cased. In loose mode "passed" next to a
    chamber name anywhere in the text counts, as does an agreed or passed
    motion mentioning the chamber.
    """
    chambers: set[Chamber] = set()
    for chamber, phrases in PASSAGE_PHRASES.items():
        if contains_any(text, phrases):
            chambers.add(chamber)
            continue
        if not loose:
            continue
        name = chamber.value.lower()
        if name not in text:
            continue
        if "passed" in text:
            chambers.add(chamber)
        elif "motion" in text and "agreed" in text:
            chambers.add(chamber)
    return chambers


# ---------------------------------------------------------------------------
# Single-text classification
# ---------------------------------------------------------------------------

def classify(text: Optional[str], mode: str = DEFAULT_MODE) -> StatusLabel:
    """Map one action text (or a bill's latest-action text) to a StatusLabel.

    Rules are checked in precedence order and the first match wins, so text
    that mentions several milestones resolves to the highest one. Never
    raises; empty input is Introduced.
    """
    if text is None:
        return StatusLabel.INTRODUCED
    raw = str(text).strip()
    if not raw:
        return StatusLabel.INTRODUCED

    loose = _resolve_mode(mode) == LOOSE
    t = raw.lower()

    if contains_any(t, ENACTED_PHRASES):
        return StatusLabel.ENACTED
    if contains_any(t, PRESIDENT_PHRASES):
        return StatusLabel.SENT_TO_PRESIDENT
    if contains_any(t, VETO_PHRASES):
        return StatusLabel.VETOED
    if contains_any(t, PASSED_CONGRESS_PHRASES):
        return StatusLabel.PASSED_CONGRESS

    chambers = passed_chambers(t, loose=loose)
    if len(chambers) == 2:
        return StatusLabel.PASSED_CONGRESS
    if Chamber.HOUSE in chambers:
        return StatusLabel.PASSED_HOUSE
    if Chamber.SENATE in chambers:
        return StatusLabel.PASSED_SENATE

    if contains_any(t, COMMITTEE_REPORT_PHRASES):
        return StatusLabel.REPORTED_BY_COMMITTEE
    if contains_any(t, COMMITTEE_REFERRAL_PHRASES):
        return StatusLabel.IN_COMMITTEE
    if loose and "committee" in t:
        return StatusLabel.IN_COMMITTEE
    if contains_any(t, CONSIDERATION_PHRASES):
        return StatusLabel.UNDER_CONSIDERATION
    if "agreed to" in t and ("house" in t or "senate" in t):
        return StatusLabel.AGREED_TO
    if contains_any(t, INTRODUCTION_PHRASES):
        return StatusLabel.INTRODUCED

    # Floor, amendment, motion and debate wording all land here.
    if loose or len(raw) > SHORT_TEXT_LIMIT:
        return StatusLabel.IN_PROGRESS
    return StatusLabel.UNCLASSIFIED


# ---------------------------------------------------------------------------
# History-based classification
# ---------------------------------------------------------------------------

def classify_history(
    actions: Iterable[ActionRecord],
    fallback_text: Optional[str] = None,
    mode: str = DEFAULT_MODE,
) -> StatusLabel:
    """Derive a bill's status from its whole action history.

    The newest action carrying a milestone decides. Introduction wording
    ("Received in the Senate.") is routine paperwork after a passage, so
    it never decides; Introduced is only the default when nothing else
    matched. A single-chamber passage becomes Passed Congress when any
    action in the history shows the other chamber passing too. With no
    actions, fallback_text is classified instead.

    Actions sharing a date are ordered by position: later in the input
    counts as newer.
    """
    mode = _resolve_mode(mode)
    records = list(actions or [])
    if not records:
        return classify(fallback_text, mode)

    loose = mode == LOOSE
    passed: set[Chamber] = set()
    for record in records:
        passed |= passed_chambers((record.text or "").lower(), loose=loose)

    newest_first = sorted(
        enumerate(records), key=lambda pair: (pair[1].timestamp, pair[0]), reverse=True
    )
    for _, record in newest_first:
        label = classify(record.text, mode)
        if label in WEAK_LABELS or label is StatusLabel.INTRODUCED:
            continue
        if label in (StatusLabel.PASSED_HOUSE, StatusLabel.PASSED_SENATE) and len(passed) == 2:
            return StatusLabel.PASSED_CONGRESS
        return label

    return StatusLabel.INTRODUCED
