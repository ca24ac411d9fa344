from __future__ import annotations

from dataclasses import dataclass

from ..models.diversity_indices import DiversityIndices
from ..models.provenance import Provenance
from .numeric import format_number

"""Result-to-prompt bridge.

Turns a computed set of indices plus provenance into the opening message of
a chat with the analyst model. Switching to the chat is left to the caller:
the bridge only produces text.
"""

__all__ = [
    "ChatHandoff",
    "to_prompt_text",
    "NO_ABUNDANCE_LABEL",
]

NO_ABUNDANCE_LABEL = "None (used row count)"
CHAT_MODE = "chat"


@dataclass(frozen=True)
class ChatHandoff:
    """Seed text for a new conversational turn plus the mode to switch to."""
    seed_text: str
    target_mode: str = CHAT_MODE


def to_prompt_text(indices: DiversityIndices, provenance: Provenance, *, decimals: int = 4) -> str:
    """Render indices and provenance as the fixed, line-oriented prompt block.

    Shannon and Simpson are printed with exactly ``decimals`` places; total
    individuals is rounded to ``decimals`` places and printed without
    trailing zeros.
    """
    if provenance.abundance_column:
        abundance = f"'{provenance.abundance_column}'"
    else:
        abundance = NO_ABUNDANCE_LABEL

    lines = [
        f"Hello! I just analyzed my dataset ({provenance.source_name}) and calculated these "
        "biodiversity indices. Can you help me interpret them?",
        "",
        "--- Calculated Indices ---",
        f"Species Richness (S): {indices.richness}",
        f"Total Individuals (N): {format_number(indices.total_individuals, decimals)}",
        f"Shannon Index (H'): {indices.shannon:.{decimals}f}",
        f"Simpson's Index (1-D): {indices.simpson_diversity:.{decimals}f}",
        "",
        "--- Data Context ---",
        f"Species Column: '{provenance.species_column}'",
        f"Abundance Column: {abundance}",
        f"Total Rows Analyzed: {provenance.row_count}",
    ]
    return "\n".join(lines) + "\n"
