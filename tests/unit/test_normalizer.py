from __future__ import annotations

import pytest

from biocitizen.errors import EmptyResultError, ValidationError
from biocitizen.services.normalizer import normalize, normalize_report


def test_normalize_abundance_scenario(abundance_records):
    counts = normalize(abundance_records, "sp", "n")
    assert counts == {"A": 5.0, "B": 5.0}


def test_normalize_presence_only(presence_records):
    counts = normalize(presence_records, "sp")
    assert counts == {"A": 2.0, "B": 1.0}


def test_missing_species_rows_do_not_count():
    records = [
        {"sp": "A", "n": "4"},
        {"sp": "   ", "n": "100"},
        {"sp": None, "n": "100"},
        {"n": "100"},
    ]
    report = normalize_report(records, "sp", "n")
    assert report.counts == {"A": 4.0}
    assert report.skipped_rows == [2, 3, 4]
    assert report.rows_seen == 4
    assert report.rows_used == 1


def test_malformed_abundance_counts_as_one():
    records = [{"sp": "A", "n": "abc"}, {"sp": "B", "n": "2"}]
    report = normalize_report(records, "sp", "n")
    assert report.counts == {"A": 1.0, "B": 2.0}
    assert report.coerced_rows == [1]
    assert report.used_abundance is True


@pytest.mark.parametrize("raw", ["0", "-3", "", None, "n/a"])
def test_non_positive_or_missing_abundance_counts_as_one(raw):
    counts = normalize([{"sp": "A", "n": raw}], "sp", "n")
    assert counts == {"A": 1.0}


def test_thousands_separator_and_numbers():
    records = [{"sp": "A", "n": "1,200"}, {"sp": "A", "n": 300}, {"sp": "B", "n": 0.5}]
    counts = normalize(records, "sp", "n")
    assert counts == {"A": 1500.0, "B": 0.5}


def test_species_labels_trimmed_case_sensitive():
    records = [{"sp": " Robin"}, {"sp": "Robin "}, {"sp": "robin"}]
    counts = normalize(records, "sp")
    assert counts == {"Robin": 2.0, "robin": 1.0}


def test_unknown_abundance_column_falls_back_to_presence(abundance_records):
    report = normalize_report(abundance_records, "sp", "count")
    assert report.counts == {"A": 2.0, "B": 1.0}
    assert report.used_abundance is False


def test_empty_abundance_column_is_presence_only(abundance_records):
    assert normalize(abundance_records, "sp", "") == {"A": 2.0, "B": 1.0}


def test_later_records_missing_fields_are_absent():
    records = [{"sp": "A", "n": "2"}, {"sp": "B"}]
    assert normalize(records, "sp", "n") == {"A": 2.0, "B": 1.0}


@pytest.mark.parametrize("column", ["", "   "])
def test_missing_species_column(column, presence_records):
    with pytest.raises(ValidationError, match="missing species column"):
        normalize(presence_records, column)


def test_unknown_species_column(presence_records):
    with pytest.raises(ValidationError, match="unknown species column"):
        normalize(presence_records, "species")


def test_explicit_columns_are_used_for_validation():
    records = [{"sp": "A"}]
    with pytest.raises(ValidationError):
        normalize(records, "sp", columns=["name", "n"])


def test_all_species_unusable_raises_empty_result():
    records = [{"sp": ""}, {"sp": "  "}, {"sp": None}]
    with pytest.raises(EmptyResultError):
        normalize(records, "sp")


def test_no_records_raises_empty_result():
    with pytest.raises(EmptyResultError):
        normalize([], "sp")


def test_strict_abundance_rejects_malformed():
    records = [{"sp": "A", "n": "3"}, {"sp": "B", "n": "abc"}]
    with pytest.raises(ValidationError, match="row 2"):
        normalize(records, "sp", "n", strict_abundance=True)


def test_strict_abundance_accepts_valid():
    records = [{"sp": "A", "n": "3"}, {"sp": "B", "n": "1,000"}]
    assert normalize(records, "sp", "n", strict_abundance=True) == {"A": 3.0, "B": 1000.0}


def test_input_records_not_modified(abundance_records):
    before = [dict(r) for r in abundance_records]
    normalize(abundance_records, "sp", "n")
    assert abundance_records == before


def test_numeric_species_values():
    records = [{"sp": 3}, {"sp": 3.0}, {"sp": "3"}]
    assert normalize(records, "sp") == {"3": 3.0}
