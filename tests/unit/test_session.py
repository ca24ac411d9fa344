from __future__ import annotations

import pytest

from biocitizen.errors import EmptyResultError, ValidationError
from biocitizen.models.table_data import TableData
from biocitizen.services.session import AnalysisSession


@pytest.fixture()
def table(abundance_records) -> TableData:
    return TableData.from_records("survey.csv", abundance_records)


def test_full_workflow(table):
    session = AnalysisSession()
    session.load_table(table)
    session.select_columns("sp", "n")
    ind = session.calculate()
    assert ind.richness == 2
    assert session.report is not None
    assert session.report.skipped_rows == [4]

    handoff = session.handoff()
    assert handoff.target_mode == "chat"
    assert "(survey.csv)" in handoff.seed_text
    assert "Total Rows Analyzed: 4" in handoff.seed_text


def test_calculate_without_table():
    with pytest.raises(ValidationError, match="no table loaded"):
        AnalysisSession().calculate()


def test_calculate_without_selection(table):
    session = AnalysisSession()
    session.load_table(table)
    with pytest.raises(ValidationError, match="missing species column"):
        session.calculate()


def test_select_unknown_column_rejected(table):
    session = AnalysisSession()
    session.load_table(table)
    with pytest.raises(ValidationError):
        session.select_columns("species")
    with pytest.raises(ValidationError):
        session.select_columns("sp", "count")
    assert session.selection is None


def test_handoff_requires_calculation(table):
    session = AnalysisSession()
    session.load_table(table)
    session.select_columns("sp")
    with pytest.raises(ValidationError):
        session.handoff()


def test_reselecting_clears_indices(table):
    session = AnalysisSession()
    session.load_table(table)
    session.select_columns("sp", "n")
    session.calculate()
    session.select_columns("sp")
    assert session.indices is None
    ind = session.calculate()
    assert ind.total_individuals == 3.0


def test_loading_new_table_resets_state(table, presence_records):
    session = AnalysisSession()
    session.load_table(table)
    session.select_columns("sp", "n")
    session.calculate()
    session.load_table(TableData.from_records("walk.csv", presence_records))
    assert session.selection is None
    assert session.indices is None
    assert session.report is None


def test_failure_keeps_table_for_retry():
    records = [{"name": "", "sp": "A"}, {"name": " ", "sp": "B"}]
    session = AnalysisSession()
    session.load_table(TableData.from_records("t.csv", records))
    session.select_columns("name")
    with pytest.raises(EmptyResultError):
        session.calculate()
    assert session.indices is None
    assert session.table is not None and session.table.row_count == 2

    session.select_columns("sp")
    assert session.calculate().richness == 2


def test_strict_session():
    records = [{"sp": "A", "n": "x"}]
    session = AnalysisSession(strict_abundance=True)
    session.load_table(TableData.from_records("t.csv", records))
    session.select_columns("sp", "n")
    with pytest.raises(ValidationError):
        session.calculate()


def test_session_decimals_used_in_handoff(table):
    session = AnalysisSession(decimals=2)
    session.load_table(table)
    session.select_columns("sp", "n")
    session.calculate()
    assert "Shannon Index (H'): 0.69\n" in session.handoff().seed_text
