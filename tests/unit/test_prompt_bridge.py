from __future__ import annotations

from biocitizen.models.diversity_indices import DiversityIndices
from biocitizen.models.provenance import Provenance
from biocitizen.services.indices import compute
from biocitizen.services.prompt_bridge import NO_ABUNDANCE_LABEL, ChatHandoff, to_prompt_text


def _provenance(abundance: str | None = "n") -> Provenance:
    return Provenance(source_name="pond_survey.csv", species_column="sp", abundance_column=abundance, row_count=4)


def test_prompt_names_source_and_indices():
    ind = compute({"A": 5.0, "B": 5.0})
    text = to_prompt_text(ind, _provenance())
    assert "(pond_survey.csv)" in text
    assert "Species Richness (S): 2\n" in text
    assert "Total Individuals (N): 10\n" in text
    assert "Shannon Index (H'): 0.6931\n" in text
    assert "Simpson's Index (1-D): 0.5000\n" in text
    assert "Species Column: 'sp'\n" in text
    assert "Abundance Column: 'n'\n" in text
    assert text.endswith("Total Rows Analyzed: 4\n")


def test_prompt_without_abundance_column_uses_sentinel():
    ind = compute({"A": 2.0, "B": 1.0})
    text = to_prompt_text(ind, _provenance(abundance=None))
    assert f"Abundance Column: {NO_ABUNDANCE_LABEL}\n" in text
    assert "Abundance Column: None (used row count)" in text
    assert "Simpson's Index (1-D): 0.4444" in text
    assert "Shannon Index (H'): 0.6365" in text


def test_prompt_rounds_total_individuals():
    ind = DiversityIndices(richness=3, total_individuals=12.123456, shannon=1.0, simpson_diversity=0.6)
    text = to_prompt_text(ind, _provenance())
    assert "Total Individuals (N): 12.1235\n" in text
    assert "Shannon Index (H'): 1.0000\n" in text


def test_prompt_decimals_configurable():
    ind = compute({"A": 2.0, "B": 1.0})
    text = to_prompt_text(ind, _provenance(), decimals=2)
    assert "Shannon Index (H'): 0.64\n" in text
    assert "Simpson's Index (1-D): 0.44\n" in text


def test_prompt_is_pure():
    ind = compute({"A": 2.0, "B": 1.0})
    assert to_prompt_text(ind, _provenance()) == to_prompt_text(ind, _provenance())


def test_handoff_defaults_to_chat_mode():
    h = ChatHandoff(seed_text="hello")
    assert h.target_mode == "chat"
