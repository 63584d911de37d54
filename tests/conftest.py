"""Shared fixtures."""

from __future__ import annotations

import pytest

from planroom.files.models import DrawingSet, DrawingSheet

from tests.helpers import FakeStorage, make_file


@pytest.fixture
def storage() -> FakeStorage:
    """Return a project with files at the root, in /photos, and in /contracts/2024."""
    return FakeStorage(
        files=[
            make_file("1", None, name="Schedule.xlsx", category="other"),
            make_file("2", "/photos", name="Site walk.jpg", category="photos", tags=["walkthrough"]),
            make_file("3", "/contracts", name="Prime contract.pdf", category="contracts"),
            make_file("4", "/contracts/2024", name="Change order.pdf", category="contracts"),
            make_file("5", None, name="Permit.pdf", category="permits", description="city permit"),
        ],
        folders=["/submittals"],
        drawing_sets=[DrawingSet(id="set-1", title="Architectural CDs", sheet_count=2)],
        sheets=[
            DrawingSheet(id="s2", drawing_set_id="set-1", sheet_number="A-102", sort_order=1),
            DrawingSheet(id="s1", drawing_set_id="set-1", sheet_number="A-101", sheet_title="Floor plan"),
        ],
    )
