"""Tests: status.py — single-text and history-based classification.

Pure functions only.
"""
import pytest

from civic.legislative.status import (
    LOOSE,
    STRICT,
    classify,
    classify_history,
    passed_chambers,
)
from civic.legislative.taxonomy import ActionRecord, Chamber, StatusLabel


# ---------------------------------------------------------------------------
# classify — defaults
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("text", ["", None, "   "])
def test_classify_empty_is_introduced(text):
    assert classify(text) is StatusLabel.INTRODUCED


def test_classify_is_idempotent():
    text = "Passed Senate with an amendment by Voice Vote."
    assert classify(text) is classify(text)


def test_classify_returns_closed_enum_for_short_unmatched_text():
    assert classify("Foo bar") is StatusLabel.UNCLASSIFIED


def test_classify_long_unmatched_text_is_in_progress():
    text = "Motion to table the motion to reconsider the vote was offered on the floor."
    assert classify(text) is StatusLabel.IN_PROGRESS


# ---------------------------------------------------------------------------
# classify — precedence
# ---------------------------------------------------------------------------

def test_classify_highest_milestone_wins():
    text = "Passed House, passed Senate, became Public Law No. 117-1"
    assert classify(text) is StatusLabel.ENACTED


def test_classify_signed_by_president_is_enacted():
    assert classify("Signed by President.") is StatusLabel.ENACTED


def test_classify_presented_to_president():
    assert classify("Presented to President.") is StatusLabel.SENT_TO_PRESIDENT


def test_classify_president_outranks_passage():
    text = "Passed Senate; presented to President"
    assert classify(text) is StatusLabel.SENT_TO_PRESIDENT


def test_classify_vetoed():
    assert classify("Vetoed by President.") is StatusLabel.VETOED


def test_classify_pocket_veto():
    assert classify("Pocket Veto by President.") is StatusLabel.VETOED


def test_classify_passed_congress_phrase():
    assert classify("Passed Congress") is StatusLabel.PASSED_CONGRESS


def test_classify_passed_house():
    text = "Passed/agreed to in House: On passage Passed by recorded vote: 250 - 180."
    assert classify(text) is StatusLabel.PASSED_HOUSE


def test_classify_passed_senate():
    text = "Passed Senate without amendment by Unanimous Consent."
    assert classify(text) is StatusLabel.PASSED_SENATE


def test_classify_both_chambers_in_one_text_is_passed_congress():
    assert classify("Passed House and passed Senate") is StatusLabel.PASSED_CONGRESS


def test_classify_reported_by_committee():
    assert classify("Ordered to be Reported by Voice Vote.") is StatusLabel.REPORTED_BY_COMMITTEE


def test_classify_report_outranks_referral():
    text = "Referred to the Committee on Finance; committee agreed to report"
    assert classify(text) is StatusLabel.REPORTED_BY_COMMITTEE


def test_classify_referred_to_committee():
    text = "Referred to the Committee on Ways and Means"
    assert classify(text) is StatusLabel.IN_COMMITTEE


def test_classify_under_consideration():
    text = "Considered under suspension of the rules."
    assert classify(text) is StatusLabel.UNDER_CONSIDERATION


def test_classify_agreed_to_with_chamber_qualifier():
    text = "Motion to proceed agreed to by the Senate"
    assert classify(text) is StatusLabel.AGREED_TO


def test_classify_introduced():
    assert classify("Introduced in House") is StatusLabel.INTRODUCED


def test_classify_read_the_first_time():
    assert classify("Read the first time.") is StatusLabel.INTRODUCED


def test_classify_is_case_insensitive():
    assert classify("BECAME PUBLIC LAW NO: 119-2.") is StatusLabel.ENACTED


# ---------------------------------------------------------------------------
# classify — loose mode
# ---------------------------------------------------------------------------

def test_loose_accepts_passed_near_chamber_name():
    text = "On passage Passed by the Yeas and Nays in the House"
    assert classify(text, STRICT) is not StatusLabel.PASSED_HOUSE
    assert classify(text, LOOSE) is StatusLabel.PASSED_HOUSE


def test_loose_committee_mention_is_in_committee():
    text = "Committee Hearings Held."
    assert classify(text, STRICT) is StatusLabel.UNCLASSIFIED
    assert classify(text, LOOSE) is StatusLabel.IN_COMMITTEE


def test_loose_never_unclassified():
    assert classify("Foo bar", LOOSE) is StatusLabel.IN_PROGRESS


def test_unknown_mode_falls_back_to_strict():
    assert classify("Foo bar", "fuzzy") is StatusLabel.UNCLASSIFIED


# ---------------------------------------------------------------------------
# passed_chambers
# ---------------------------------------------------------------------------

def test_passed_chambers_strict():
    assert passed_chambers("passed senate without amendment") == {Chamber.SENATE}


def test_passed_chambers_none():
    assert passed_chambers("received in the senate") == set()


# ---------------------------------------------------------------------------
# classify_history
# ---------------------------------------------------------------------------

def test_history_empty_uses_fallback_text():
    assert classify_history([], "Became Public Law No: 119-2.") is StatusLabel.ENACTED


def test_history_empty_without_fallback_is_introduced():
    assert classify_history([]) is StatusLabel.INTRODUCED


def test_history_newest_milestone_decides(hr1_actions):
    assert classify_history(hr1_actions) is StatusLabel.IN_COMMITTEE


def test_history_promotes_to_passed_congress():
    actions = [
        ActionRecord(date="2025-02-01", text="Passed House"),
        ActionRecord(date="2025-04-01", text="Passed Senate without amendment"),
    ]
    assert classify_history(actions) is StatusLabel.PASSED_CONGRESS


def test_history_skips_weak_labels():
    actions = [
        ActionRecord(date="2025-01-03", text="Introduced in Senate"),
        ActionRecord(date="2025-01-09", text="Star Print ordered on the bill."),
    ]
    assert classify_history(actions) is StatusLabel.INTRODUCED


def test_history_enacted(enacted_actions):
    assert classify_history(enacted_actions) is StatusLabel.ENACTED


def test_history_receipt_in_second_chamber_keeps_passage():
    actions = [
        ActionRecord(date="2025-01-03", text="Introduced in House"),
        ActionRecord(date="2025-03-05", text="Passed/agreed to in House: On passage Passed by recorded vote: 250 - 180."),
        ActionRecord(date="2025-03-06", text="Received in the Senate."),
    ]
    assert classify_history(actions) is StatusLabel.PASSED_HOUSE


def test_history_message_received_does_not_reset_status():
    actions = [
        ActionRecord(date="2025-03-05", text="Passed House"),
        ActionRecord(date="2025-03-06", text="Message on House action received in Senate and at desk."),
    ]
    assert classify_history(actions) is StatusLabel.PASSED_HOUSE


def test_history_only_introduction_is_introduced():
    actions = [
        ActionRecord(date="2025-01-03", text="Introduced in Senate"),
        ActionRecord(date="2025-01-03", text="Read the first time."),
    ]
    assert classify_history(actions) is StatusLabel.INTRODUCED


def test_history_same_day_later_entry_is_newer():
    referral = ActionRecord(date="2025-03-01", text="Referred to the Committee on Rules")
    passage = ActionRecord(date="2025-03-01", text="Passed/agreed to in House")
    assert classify_history([referral, passage]) is StatusLabel.PASSED_HOUSE
    assert classify_history([passage, referral]) is StatusLabel.IN_COMMITTEE


def test_history_out_of_range_date_does_not_raise():
    actions = [
        ActionRecord(date="0001-01-01T00:00:00+05:00", text="Passed House"),
        ActionRecord(date="2025-01-03", text="Introduced in House"),
    ]
    assert classify_history(actions) is StatusLabel.PASSED_HOUSE
