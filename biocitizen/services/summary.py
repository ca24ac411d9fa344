from __future__ import annotations

from ..models.processing_result import AnalysisRunResult

"""SUMMARY line rendering for batch analysis runs.

Format:
SUMMARY files={total}/{total} success={success} failed={failed} rows={rows}
"""


def render_summary_line(result: AnalysisRunResult) -> str:
    """Render the SUMMARY line for a finished run.

    Examples:
        >>> result = AnalysisRunResult(success_files=1, failed_files=1, total_rows=12)
        >>> render_summary_line(result)
        'SUMMARY files=2/2 success=1 failed=1 rows=12'
    """
    total_files = result.success_files + result.failed_files
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows}"
    )
