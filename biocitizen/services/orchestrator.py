from __future__ import annotations

import logging
from pathlib import Path

from ..config.loader import AppConfig
from ..errors import BioCitizenError
from ..models.column_selection import ColumnSelection
from ..models.processing_result import AnalysisRunResult, FileStat
from ..tables.reader import TableReadError, export_table_json, read_table
from .progress import ProgressTracker
from .session import AnalysisSession

"""Batch analysis over several table files (CSV, or JSON records from ``extract``).

Each file gets its own AnalysisSession; a failure in one file (unreadable file,
bad column selection, no species data) is recorded in its FileStat and the run
continues with the next file.
"""

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"


def analyze_file(
    path: Path,
    selection: ColumnSelection,
    config: AppConfig,
    *,
    export_dir: Path | None = None,
) -> tuple[FileStat, str | None]:
    """Analyze one CSV or JSON-records file.

    Returns:
        (FileStat, prompt text) - prompt text is None when the file failed
    """
    try:
        table = read_table(path, null_sentinels=config.null_sentinels or None)
    except TableReadError as e:
        logger.error(f"{path.name}: {e}")
        return FileStat(file_name=path.name, status=STATUS_FAILED, rows=0, error=str(e)), None

    session = AnalysisSession(strict_abundance=config.strict_abundance, decimals=config.decimals)
    session.load_table(table)
    try:
        session.select_columns(selection.species_column, selection.abundance_column)
        indices = session.calculate()
    except BioCitizenError as e:
        logger.error(f"{path.name}: {e}")
        return FileStat(file_name=path.name, status=STATUS_FAILED, rows=table.row_count, error=str(e)), None

    report = session.report
    if report is not None and (report.skipped_rows or report.coerced_rows):
        logger.warning(
            f"{path.name}: skipped_rows={len(report.skipped_rows)} "
            f"abundance_counted_as_one={len(report.coerced_rows)}"
        )

    if export_dir is not None:
        export_dir.mkdir(parents=True, exist_ok=True)
        out = export_dir / f"{path.stem}_data.json"
        out.write_text(export_table_json(table), encoding="utf-8")
        logger.info(f"exported {out}")

    stat = FileStat(file_name=path.name, status=STATUS_SUCCESS, rows=table.row_count, indices=indices)
    return stat, session.handoff().seed_text


def analyze_all(
    paths: list[Path],
    selection: ColumnSelection,
    config: AppConfig,
    *,
    export_dir: Path | None = None,
) -> tuple[AnalysisRunResult, dict[str, str]]:
    """Analyze every file; returns the aggregated result and prompt texts by file name."""
    file_stats: list[FileStat] = []
    prompts: dict[str, str] = {}
    success_count = 0
    failed_count = 0
    total_rows = 0

    with ProgressTracker(len(paths)) as progress:
        for path in paths:
            progress.start_file(path)
            stat, prompt = analyze_file(path, selection, config, export_dir=export_dir)
            if stat.status == STATUS_SUCCESS:
                success_count += 1
                total_rows += stat.rows
            else:
                failed_count += 1
            if prompt is not None:
                prompts[stat.file_name] = prompt
            file_stats.append(stat)
            progress.set_postfix(success=success_count, failed=failed_count)
            progress.finish_file(success=stat.status == STATUS_SUCCESS)

    result = AnalysisRunResult(
        success_files=success_count,
        failed_files=failed_count,
        total_rows=total_rows,
        file_stats=file_stats,
    )
    return result, prompts
