#!/usr/bin/env python3
"""
Bill Status Agent
=================
Derives a status badge and a progress-bar position for each bill in a
batch, using the shared status classifier and progress tracker.

Pipeline:  load → [fetch actions] → evaluate → diff → store → report

Input is a JSON file holding either a list of bill payloads or a
{"bills": {...}} mapping. Each bill needs a designator ("type" or
"number", e.g. "HR" / "H.R. 1") or an origin chamber, and optionally an
"actions" list and a "latestAction".

Usage:
    python -m civic.legislative.bill_status --input bills.json
    python -m civic.legislative.bill_status --demo
    python -m civic.legislative.bill_status --input bills.json --fetch
    python -m civic.legislative.bill_status --input bills.json --previous outputs/bill_status.json
    python -m civic.legislative.bill_status --help

Environment variables:
    CONGRESS_API_KEY   Key from https://api.congress.gov/sign-up/ (needed for --fetch)

    Credentials can be stored in a .env file at the project root.
"""

from __future__ import annotations

import argparse
import os
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import requests
import yaml
from dotenv import load_dotenv

from civic.legislative.progress import compute_progress
from civic.legislative.status import LOOSE, STRICT, classify, classify_history
from civic.shared.bill_utils import (
    api_identifier,
    bill_label,
    descriptor_from_bill,
    fallback_status_text,
    normalize_actions,
)
from civic.shared.utils import (
    ensure_dir,
    http_get_json,
    load_json,
    save_json,
    setup_logging,
)

load_dotenv()

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_CONFIG = Path(__file__).parent / "config.yaml"


# ===========================================================================
# Pure helpers
# ===========================================================================

def bill_key(bill: dict) -> str:
    """Stable key for a bill across runs."""
    if bill.get("id"):
        return str(bill["id"])
    congress = bill.get("congress")
    label = bill_label(bill)
    return f"{congress}-{label}" if congress else label


def evaluate_bill(bill: dict, mode: str = STRICT) -> dict:
    """
    Compute badge status and progress for one bill payload.

    Returns a JSON-ready dict:
      status         — history-based label in the configured mode
      search_status  — latest-action label in loose mode (search results)
      progress       — stages, current_stage_index, current_stage, percent_complete
    """
    actions = normalize_actions(bill.get("actions"))
    latest = fallback_status_text(bill)
    descriptor = descriptor_from_bill(bill)

    status = classify_history(actions, fallback_text=latest, mode=mode)
    progress = compute_progress(descriptor, actions, fallback_status_text=latest)

    search_text = latest
    if not search_text and actions:
        search_text = max(actions, key=lambda a: a.timestamp).text

    return {
        "bill":           bill_label(bill),
        "title":          bill.get("title", ""),
        "chamber":        descriptor.chamber_of_origin.value,
        "kind":           descriptor.resolution_kind.value,
        "status":         status.value,
        "search_status":  classify(search_text, LOOSE).value,
        "progress":       progress.to_dict(),
        "action_count":   len(actions),
    }


def diff_statuses(previous: dict, current: dict) -> tuple[list[str], list[dict]]:
    """
    Compare this run's results against a previous run's.

    Args:
        previous: Results mapping from an earlier run (may be empty).
        current:  Results mapping from this run.

    Returns:
        (new_keys, changes) where each change is
        {"key", "bill", "from", "to"}.
    """
    new_keys: list[str] = []
    changes: list[dict] = []
    for key, result in current.items():
        if key not in previous:
            new_keys.append(key)
            continue
        old_status = previous[key].get("status", "")
        if old_status != result["status"]:
            changes.append({
                "key":  key,
                "bill": result["bill"],
                "from": old_status,
                "to":   result["status"],
            })
    return new_keys, changes


def render_report(
    date_str: str,
    results: dict,
    new_keys: list[str],
    changes: list[dict],
) -> str:
    """Render the markdown status summary."""
    lines = [
        f"# Bill Status Report — {date_str}",
        "",
        f"- Bills evaluated: **{len(results)}**",
        f"- New since last run: **{len(new_keys)}**",
        f"- Status changes: **{len(changes)}**",
        "",
    ]

    if changes:
        lines += ["## Status Changes", ""]
        for c in changes:
            lines.append(f"- **{c['bill']}**: {c['from'] or '(none)'} → {c['to']}")
        lines.append("")

    lines += [
        "## All Bills",
        "",
        "| Bill | Status | Stage | Progress |",
        "|---|---|---|---|",
    ]
    for key in sorted(results):
        r = results[key]
        p = r["progress"]
        lines.append(
            f"| {r['bill']} | {r['status']} | {p['current_stage']} | "
            f"{p['percent_complete']:.0f}% |"
        )
    lines.append("")
    return "\n".join(lines)


def _bills_from_payload(data) -> list[dict]:
    """Accept a list of bills, {"bills": [...]} or {"bills": {key: bill}}."""
    if isinstance(data, list):
        return [b for b in data if isinstance(b, dict)]
    if isinstance(data, dict):
        bills = data.get("bills", [])
        if isinstance(bills, dict):
            bills = list(bills.values())
        return [b for b in bills if isinstance(b, dict)]
    return []


# ===========================================================================
# BillStatusAgent
# ===========================================================================

class BillStatusAgent:
    """
    Batch status/progress evaluation for a set of bills.

    Stateless between runs: the previous results file, when given, is the
    only reference point for change detection.
    """

    def __init__(self, config_path: Path = DEFAULT_CONFIG, mode: Optional[str] = None):
        self.config = self._load_config(config_path)
        self.mode = mode or self.config.get("classifier", {}).get("mode", STRICT)
        self._setup_paths()
        self.logger = setup_logging(
            name="civic",
            level=self.config["logging"]["level"],
            log_file=self._log_file,
        )

    def _load_config(self, config_path: Path) -> dict:
        with open(config_path, encoding="utf-8") as f:
            return yaml.safe_load(f)

    def _setup_paths(self) -> None:
        root = PROJECT_ROOT
        self.output_path: Path = root / self.config["paths"]["output_file"]
        self.reports_dir: Path = root / self.config["paths"]["reports_dir"]

        log_file = self.config["logging"].get("file")
        self._log_file: Optional[Path] = (root / log_file) if log_file else None

        ensure_dir(self.output_path.parent)
        ensure_dir(self.reports_dir)

    # -----------------------------------------------------------------------
    # Main entry point
    # -----------------------------------------------------------------------

    def run(
        self,
        input_path: Optional[Path] = None,
        demo: bool = False,
        fetch: bool = False,
        previous_path: Optional[Path] = None,
    ) -> Path:
        """Run the pipeline. Returns the path to the markdown report."""
        self.logger.info("=" * 60)
        self.logger.info("Bill status agent — pipeline start")
        self.logger.info(f"Mode      : {'DEMO' if demo else 'FILE'} / classifier={self.mode}")

        # Stage 1: load
        if demo:
            bills = _demo_bills()
        elif input_path:
            bills = _bills_from_payload(load_json(input_path, logger=self.logger))
        else:
            bills = []
        if not bills:
            self.logger.error("No bills to evaluate. Pass --input <file> or --demo.")
            sys.exit(1)
        self.logger.info(f"Stage 1 complete — {len(bills)} bills loaded")

        # Stage 2: fetch (optional)
        if fetch:
            bills = [self._refresh_actions(b) for b in bills]
            self.logger.info("Stage 2 complete — actions refreshed")

        # Stage 3: evaluate
        results = {bill_key(b): evaluate_bill(b, self.mode) for b in bills}
        self.logger.info(f"Stage 3 complete — {len(results)} bills evaluated")

        # Stage 4: diff against the previous run
        previous = {}
        if previous_path:
            stored = load_json(previous_path, logger=self.logger)
            if isinstance(stored, dict):
                previous = stored.get("results", {})
        new_keys, changes = diff_statuses(previous, results)
        for c in changes:
            self.logger.info(f"[CHANGED] {c['bill']}: '{c['from']}' → '{c['to']}'")
        self.logger.info(
            f"Stage 4 complete — new: {len(new_keys)}, changed: {len(changes)}"
        )

        # Stage 5: store + report
        save_json(
            {
                "generated_at":    datetime.now().isoformat(),
                "classifier_mode": self.mode,
                "results":         results,
            },
            self.output_path,
            logger=self.logger,
        )
        date_str = date.today().isoformat()
        report_path = self.reports_dir / f"bill_status_{date_str}.md"
        report_path.write_text(
            render_report(date_str, results, new_keys, changes), encoding="utf-8"
        )
        self.logger.info(f"Stage 5 complete — report: {report_path}")
        self.logger.info("=" * 60)
        return report_path

    # -----------------------------------------------------------------------
    # Congress.gov
    # -----------------------------------------------------------------------

    def _refresh_actions(self, bill: dict) -> dict:
        """Replace a bill's actions with the Congress.gov list; keep them on failure."""
        api_key = os.environ.get("CONGRESS_API_KEY", "").strip()
        if not api_key:
            self.logger.warning("CONGRESS_API_KEY not set — skipping action refresh")
            return bill

        api = self.config["congress_api"]
        ident = api_identifier(bill)
        if ident is None:
            self.logger.warning(f"{bill_label(bill)}: no type/number — skipping fetch")
            return bill
        kind, number = ident

        congress = bill.get("congress") or api["congress"]
        url = f"{api['base_url']}/bill/{congress}/{kind}/{number}/actions"
        try:
            data = http_get_json(
                url,
                params={"api_key": api_key, "format": "json", "limit": 250},
                timeout=api.get("timeout", 30),
                max_retries=api.get("max_retries", 3),
                retry_delay=api.get("retry_delay", 2.0),
                logger=self.logger,
            )
        except requests.RequestException as exc:
            self.logger.warning(f"{bill_label(bill)}: action fetch failed ({exc}) — using stored actions")
            return bill

        actions = data.get("actions") or []
        self.logger.info(f"{bill_label(bill)}: fetched {len(actions)} actions")
        if not actions:
            return bill
        return {**bill, "actions": actions}


# ===========================================================================
# Demo data
# ===========================================================================

def _demo_bills() -> list[dict]:
    """Sample bills covering each stage sequence."""
    return [
        {
            "congress": 119,
            "type": "HR",
            "number": "1",
            "title": "Sample House Bill",
            "originChamber": "House",
            "actions": [
                {"actionDate": "2025-01-03", "text": "Introduced in House"},
                {"actionDate": "2025-03-10", "text": "Referred to the Committee on Ways and Means."},
            ],
        },
        {
            "congress": 119,
            "type": "S",
            "number": "5",
            "title": "Sample Senate Bill",
            "originChamber": "Senate",
            "actions": [
                {"actionDate": "2025-01-06", "text": "Introduced in Senate"},
                {"actionDate": "2025-01-20", "text": "Passed Senate without amendment by Unanimous Consent."},
                {"actionDate": "2025-02-04", "text": "Passed/agreed to in House: On passage Passed by the Yeas and Nays."},
                {"actionDate": "2025-02-07", "text": "Presented to President."},
                {"actionDate": "2025-02-12", "text": "Became Public Law No: 119-2."},
            ],
        },
        {
            "congress": 119,
            "type": "HCONRES",
            "number": "14",
            "title": "Sample Concurrent Resolution",
            "originChamber": "House",
            "actions": [
                {"actionDate": "2025-02-20", "text": "Passed/agreed to in House"},
                {"actionDate": "2025-04-03", "text": "Passed/agreed to in Senate"},
            ],
        },
        {
            "congress": 119,
            "type": "SRES",
            "number": "12",
            "title": "Sample Simple Resolution",
            "originChamber": "Senate",
            "actions": [],
            "latestAction": {"actionDate": "2025-01-15", "text": "Referred to the Committee on the Judiciary."},
        },
    ]


# ===========================================================================
# CLI entry point
# ===========================================================================

def main() -> None:
    parser = argparse.ArgumentParser(
        description=(
            "Bill status agent — derives status badges and progress-bar "
            "positions for a batch of bills."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  python -m civic.legislative.bill_status --demo
  python -m civic.legislative.bill_status --input bills.json --mode loose
  python -m civic.legislative.bill_status --input bills.json --fetch --previous outputs/bill_status.json

environment variables:
  CONGRESS_API_KEY   Congress.gov API key (required for --fetch)
        """,
    )
    parser.add_argument("--input", type=Path, help="JSON file of bill payloads")
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use built-in sample bills instead of --input",
    )
    parser.add_argument(
        "--fetch",
        action="store_true",
        help="Refresh each bill's actions from the Congress.gov API",
    )
    parser.add_argument(
        "--mode",
        choices=["strict", "loose"],
        help="Classifier phrase set (default: from config)",
    )
    parser.add_argument(
        "--previous",
        type=Path,
        help="Results file from an earlier run, for change detection",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Path to config YAML file (default: {DEFAULT_CONFIG})",
    )
    args = parser.parse_args()

    agent = BillStatusAgent(config_path=args.config, mode=args.mode)
    report = agent.run(
        input_path=args.input,
        demo=args.demo,
        fetch=args.fetch,
        previous_path=args.previous,
    )
    print(f"Report: {report}")


if __name__ == "__main__":
    main()
