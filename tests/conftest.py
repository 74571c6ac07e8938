"""Shared pytest fixtures for the bill status test suite.

Action texts follow Congress.gov wording so the classifier and tracker are
exercised against the phrasing they see in production.
"""
import pytest

from civic.legislative.taxonomy import (
    ActionRecord,
    BillTypeDescriptor,
    Chamber,
    ResolutionKind,
)


# ---------------------------------------------------------------------------
# Descriptor fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def house_bill():
    return BillTypeDescriptor(Chamber.HOUSE, ResolutionKind.BILL)


@pytest.fixture
def senate_bill():
    return BillTypeDescriptor(Chamber.SENATE, ResolutionKind.BILL)


@pytest.fixture
def house_simple_res():
    return BillTypeDescriptor(Chamber.HOUSE, ResolutionKind.SIMPLE_RESOLUTION)


@pytest.fixture
def house_concurrent_res():
    return BillTypeDescriptor(Chamber.HOUSE, ResolutionKind.CONCURRENT_RESOLUTION)


# ---------------------------------------------------------------------------
# Action history fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def hr1_actions():
    """H.R. 1 — introduced, then referred to committee."""
    return [
        ActionRecord(date="2025-01-03", text="Introduced in House"),
        ActionRecord(date="2025-03-10", text="Referred to the Committee on Ways and Means"),
    ]


@pytest.fixture
def enacted_actions():
    """Full path to law for a House bill, deliberately out of order."""
    return [
        ActionRecord(date="2025-06-01", text="Became Public Law No: 119-12."),
        ActionRecord(date="2025-01-03", text="Introduced in House"),
        ActionRecord(date="2025-01-04", text="Referred to the House Committee on Energy and Commerce."),
        ActionRecord(date="2025-02-11", text="Ordered to be Reported by Voice Vote."),
        ActionRecord(date="2025-03-05", text="Passed/agreed to in House: On passage Passed by recorded vote: 250 - 180."),
        ActionRecord(date="2025-04-15", text="Passed Senate without amendment by Yea-Nay Vote. 60 - 38."),
        ActionRecord(date="2025-05-20", text="Presented to President."),
    ]


@pytest.fixture
def raw_bill():
    """Congress.gov-shaped bill payload with a duplicated action."""
    return {
        "congress": 119,
        "type": "HR",
        "number": "1",
        "title": "Sample House Bill",
        "originChamber": "House",
        "latestAction": {
            "actionDate": "2025-03-10",
            "text": "Referred to the Committee on Ways and Means",
        },
        "actions": [
            {"actionDate": "2025-03-10", "text": "Referred to the Committee on Ways and Means"},
            {"actionDate": "2025-01-03", "text": "Introduced in House"},
            {"actionDate": "2025-03-10", "text": "  referred to the committee on ways and means "},
        ],
    }
