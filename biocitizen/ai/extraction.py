from __future__ import annotations

import logging

from ..models.table_data import TableData
from ..tables.reader import records_from_json
from .client import GeminiClient, ImagePayload

"""Table extraction from a photographed or handwritten table."""

logger = logging.getLogger(__name__)

EXTRACTION_SYSTEM_PROMPT = (
    "You are a data extraction tool. You will be given an image of a table (handwritten or typed) "
    "containing biodiversity data. Your task is to extract this data and return **ONLY** a valid "
    "JSON array of objects. The keys in the objects should be the column headers. Be as accurate "
    "as possible. Do not include markdown formatting (like ```json) or any other explanatory text. "
    "Just return the valid JSON array."
)
EXTRACTION_PROMPT = "Extract the table data from this image and return it as a JSON array of objects."


def extract_table_from_image(client: GeminiClient, image: ImagePayload, source_name: str) -> TableData:
    """Ask the vision model to transcribe the table, then parse its JSON.

    Raises:
        AIError: network, API or response-shape failure
        TableReadError: the reply is not a non-empty JSON array of objects
    """
    text = client.generate(EXTRACTION_PROMPT, system_prompt=EXTRACTION_SYSTEM_PROMPT, image=image)
    table = records_from_json(text, source_name)
    logger.info(f"extracted {table.row_count} rows from {source_name}: columns={table.columns}")
    return table
