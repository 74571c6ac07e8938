"""
bill_utils.py — Boundary adapters for bill payloads.

Provides normalize_actions, parse_chamber, parse_descriptor,
descriptor_from_bill, fallback_status_text, api_identifier and bill_label.

Bill payloads arrive in several shapes (Congress.gov API responses, stored
JSON written by older tools, hand-built fixtures): actions may carry their
text under "text", "action" or "description" and their date under "date",
"actionDate" or "action_date". Everything is converted to ActionRecord /
BillTypeDescriptor here so the status engine only ever sees one shape.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Optional

from civic.legislative.taxonomy import (
    ActionRecord,
    BillTypeDescriptor,
    Chamber,
    ResolutionKind,
)

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Designators
# ---------------------------------------------------------------------------

# Congress.gov type codes, which are also what dotted designators reduce to
# once punctuation is stripped ("H.J.RES." → "HJRES").
_DESIGNATORS = {
    "HR":      (Chamber.HOUSE,  ResolutionKind.BILL),
    "S":       (Chamber.SENATE, ResolutionKind.BILL),
    "HRES":    (Chamber.HOUSE,  ResolutionKind.SIMPLE_RESOLUTION),
    "SRES":    (Chamber.SENATE, ResolutionKind.SIMPLE_RESOLUTION),
    "HCONRES": (Chamber.HOUSE,  ResolutionKind.CONCURRENT_RESOLUTION),
    "SCONRES": (Chamber.SENATE, ResolutionKind.CONCURRENT_RESOLUTION),
    "HJRES":   (Chamber.HOUSE,  ResolutionKind.JOINT_RESOLUTION),
    "SJRES":   (Chamber.SENATE, ResolutionKind.JOINT_RESOLUTION),
}

_TEXT_KEYS = ("text", "action", "description")
_DATE_KEYS = ("date", "actionDate", "action_date")


def _designator_code(designator: Any) -> str:
    """Reduce "H.J.RES. 7", "hjres", "118-hr-1234" to the letter code ("HJRES", "HR")."""
    if not designator:
        return ""
    compact = re.sub(r"[^A-Z0-9]", "", str(designator).upper())
    match = re.search(r"[A-Z]+", compact)
    return match.group(0) if match else ""


def parse_chamber(chamber: Any) -> Chamber:
    """Map a free-form chamber string ("House", "senate", "H") to a Chamber."""
    if not chamber:
        return Chamber.UNKNOWN
    value = str(chamber).strip().lower()
    if "house" in value or value == "h":
        return Chamber.HOUSE
    if "senate" in value or value == "s":
        return Chamber.SENATE
    return Chamber.UNKNOWN


def parse_descriptor(designator: Any = None, chamber: Any = None) -> BillTypeDescriptor:
    """Build a BillTypeDescriptor from a designator, falling back to the chamber.

    An unrecognized designator is treated as a bill from the given chamber
    (Chamber.UNKNOWN if that is missing too).
    """
    code = _designator_code(designator)
    if code in _DESIGNATORS:
        origin, kind = _DESIGNATORS[code]
        return BillTypeDescriptor(chamber_of_origin=origin, resolution_kind=kind)

    if designator:
        log.debug(f"Unrecognized designator '{designator}' — using chamber '{chamber}'")
    return BillTypeDescriptor(
        chamber_of_origin=parse_chamber(chamber),
        resolution_kind=ResolutionKind.BILL,
    )


def descriptor_from_bill(bill: dict) -> BillTypeDescriptor:
    """Read type/number and origin chamber from a bill payload of any known shape."""
    chamber = (
        bill.get("originChamber")
        or bill.get("origin_chamber")
        or bill.get("chamber")
    )
    for key in ("type", "bill_type", "number", "bill_number"):
        if _designator_code(bill.get(key)) in _DESIGNATORS:
            return parse_descriptor(bill[key], chamber)
    return parse_descriptor(None, chamber)


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

def _first(item: dict, keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = item.get(key)
        if value:
            return value
    return None


def normalize_actions(raw: Optional[Iterable[Any]]) -> list[ActionRecord]:
    """
    Convert raw action entries into de-duplicated ActionRecords.

    Entries without any text are dropped. Two entries with the same date and
    the same trimmed, lower-cased text are one event; the first is kept.
    Input order is preserved.
    """
    records: list[ActionRecord] = []
    seen: set[tuple[str, str]] = set()
    dropped = 0

    for item in raw or []:
        if isinstance(item, ActionRecord):
            record = item
        elif isinstance(item, dict):
            text = _first(item, _TEXT_KEYS)
            if not isinstance(text, str) or not text.strip():
                dropped += 1
                continue
            record = ActionRecord(date=_first(item, _DATE_KEYS), text=text.strip())
        else:
            dropped += 1
            continue

        if record.key in seen:
            dropped += 1
            continue
        seen.add(record.key)
        records.append(record)

    if dropped:
        log.debug(f"Actions normalized: kept {len(records)}, dropped {dropped}")
    return records


def fallback_status_text(bill: dict) -> str:
    """Latest-action text for a bill, used when its action list is empty."""
    latest = bill.get("latestAction") or bill.get("latest_action")
    if isinstance(latest, dict):
        latest = latest.get("text")
    return str(latest or bill.get("status") or "")


def api_identifier(bill: dict) -> Optional[tuple[str, str]]:
    """Congress.gov path segments (type code, number) for a bill, e.g. ("hjres", "7").

    None when either part cannot be read from the payload.
    """
    code = ""
    for key in ("type", "bill_type", "number", "bill_number"):
        candidate = _designator_code(bill.get(key))
        if candidate in _DESIGNATORS:
            code = candidate
            break
    number = str(bill.get("number") or bill.get("bill_number") or "")
    match = re.search(r"(\d+)\s*$", number)
    if not code or not match:
        return None
    return code.lower(), match.group(1)


def bill_label(bill: dict) -> str:
    """Human-readable bill identifier, e.g. "HR 1" or "S.RES. 12"."""
    number = str(bill.get("number") or bill.get("bill_number") or "").strip()
    kind = str(bill.get("type") or bill.get("bill_type") or "").strip()
    if kind and not number.upper().startswith(kind.upper()):
        return f"{kind.upper()} {number}".strip()
    return number or kind or "(unnumbered)"
