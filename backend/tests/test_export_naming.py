"""Tests for export filename construction."""
from datetime import datetime, timezone

import pytest

from assetbridge.schemas.filters import FilterSpec
from assetbridge.services.export_naming import build_filename, export_timestamp, filter_suffix

NOW = datetime(2024, 5, 1, 17, 30, 45, tzinfo=timezone.utc)


def test_timestamp_uses_utc_minus_three_by_default():
    assert export_timestamp(NOW) == "2024-05-01_1430h"


def test_timestamp_crosses_midnight():
    assert export_timestamp(datetime(2024, 5, 1, 1, 5, tzinfo=timezone.utc)) == "2024-04-30_2205h"


def test_naive_datetime_is_treated_as_utc():
    assert export_timestamp(datetime(2024, 5, 1, 17, 30)) == "2024-05-01_1430h"


def test_offset_is_configurable():
    assert export_timestamp(NOW, utc_offset_hours=0) == "2024-05-01_1730h"


def test_unfiltered_filename():
    assert build_filename("acme", "csv", FilterSpec(), now=NOW) == "assets_acme_2024-05-01_1430h.csv"


def test_filtered_filename_lists_constraints_in_order():
    spec = FilterSpec(status="active", location="all", unit="Head Office", search_text="dell")
    name = build_filename("acme", "pdf", spec, now=NOW)
    assert name == "assets_acme_2024-05-01_1430h_search-dell_status-active_unit-HeadOffice.pdf"


def test_status_and_location_suffix():
    spec = FilterSpec(status="active", location="Room 101")
    assert filter_suffix(spec) == "_status-active_location-Room101"


@pytest.mark.parametrize("spec", [None, FilterSpec(), FilterSpec(location="ALL", unit="")])
def test_no_suffix_without_constraints(spec):
    assert filter_suffix(spec) == ""


def test_same_inputs_same_name():
    spec = FilterSpec(unit="HQ")
    first = build_filename("acme", "xlsx", spec, now=NOW)
    second = build_filename("acme", ".xlsx", spec, now=NOW.replace(second=5))
    assert first == second


def test_prefix_override():
    name = build_filename("acme", "csv", now=NOW, prefix="inventory")
    assert name.startswith("inventory_acme_")


def test_code_lookup_search_is_filename_safe():
    spec = FilterSpec(search_text="code:0042")
    assert filter_suffix(spec) == "_search-code-0042"


def test_reserved_characters_in_values_and_owner_are_replaced():
    spec = FilterSpec(location='Bldg A/Room 3 "east"', unit="HQ\\North")
    name = build_filename("acme/labs", "csv", spec, now=NOW)
    assert name == "assets_acme-labs_2024-05-01_1430h_location-BldgA-Room3-east-_unit-HQ-North.csv"
    stem = name.rsplit(".", 1)[0]
    assert not any(ch in stem for ch in '\\/:*?"<>|')
