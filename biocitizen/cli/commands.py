from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from ..ai.chat import ChatMessage, ChatSession
from ..ai.client import AIError, GeminiClient, load_image
from ..ai.extraction import extract_table_from_image
from ..config.loader import AppConfig, ConfigError, get_api_key, load_config
from ..errors import BioCitizenError
from ..logging.init import enable_debug, log_summary, setup_logging
from ..models.column_selection import ColumnSelection
from ..models.processing_result import FileStat
from ..services.numeric import format_number
from ..services.orchestrator import analyze_all
from ..services.session import AnalysisSession
from ..services.summary import render_summary_line
from ..tables.reader import TableReadError, export_table_json, read_table

"""CLI entrypoint.

Commands:
- analyze: CSV or JSON-records file(s) -> diversity indices (+ optional chat prompt / JSON export)
- columns: list a table file's columns (to pick --species / --abundance)
- extract: photographed table -> JSON records via the vision model
- chat: analyze one file, seed the analyst chat with the result, continue
  with follow-up questions read from stdin ("quit" or EOF ends the chat)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="biocitizen", description="Biodiversity indices for observation tables")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=None, help="Config file (default: config/biocitizen.yml)")
    sub = p.add_subparsers(dest="command", required=True)

    a = sub.add_parser("analyze", help="Compute richness, Shannon and Simpson indices")
    a.add_argument("files", nargs="+", type=Path, help="CSV files (first row = header) or .json records from extract")
    a.add_argument("--species", required=True, help="Column holding species names")
    a.add_argument("--abundance", default=None, help="Column holding counts (omit for presence-only)")
    a.add_argument("--strict-abundance", action="store_true", help="Fail on malformed abundance values")
    a.add_argument("--prompt", action="store_true", help="Print the analyst chat prompt for each file")
    a.add_argument("--export-json", type=Path, default=None, metavar="DIR", help="Write each table as JSON")

    c = sub.add_parser("columns", help="List the columns of a CSV or .json records file")
    c.add_argument("file", type=Path)

    e = sub.add_parser("extract", help="Extract a table from an image with the vision model")
    e.add_argument("image", type=Path)
    e.add_argument("--out", type=Path, default=None, help="Write the records as JSON to this file")

    t = sub.add_parser("chat", help="Discuss a file's indices with the analyst model")
    t.add_argument("file", type=Path, help="CSV file or .json records from extract")
    t.add_argument("--species", required=True, help="Column holding species names")
    t.add_argument("--abundance", default=None, help="Column holding counts (omit for presence-only)")
    t.add_argument("--strict-abundance", action="store_true", help="Fail on malformed abundance values")
    t.add_argument("--transcript", type=Path, default=None, metavar="FILE", help="Write the chat transcript here")
    return p.parse_args(argv)


def _print_indices(stat: FileStat, decimals: int) -> None:
    ind = stat.indices
    if ind is None:
        print(f"{stat.file_name}: failed ({stat.error})")
        return
    print(
        f"{stat.file_name}: richness={ind.richness} "
        f"total_individuals={format_number(ind.total_individuals, decimals)} "
        f"shannon={ind.shannon:.{decimals}f} "
        f"simpson_diversity={ind.simpson_diversity:.{decimals}f}"
    )


def _cmd_analyze(args: argparse.Namespace, cfg: AppConfig) -> int:
    if args.strict_abundance:
        cfg = replace(cfg, strict_abundance=True)
    selection = ColumnSelection(species_column=args.species, abundance_column=args.abundance)
    result, prompts = analyze_all(args.files, selection, cfg, export_dir=args.export_json)

    for stat in result.file_stats:
        _print_indices(stat, cfg.decimals)
        if args.prompt and stat.file_name in prompts:
            print(prompts[stat.file_name])

    summary_line = render_summary_line(result)
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def _cmd_columns(args: argparse.Namespace, cfg: AppConfig) -> int:
    try:
        table = read_table(args.file, null_sentinels=cfg.null_sentinels or None)
    except TableReadError as e:
        setup_logging().error(f"columns: {e}")
        return EXIT_FATAL
    print(f"FILE: {table.source_name} rows={table.row_count}")
    for col in table.columns:
        print(f"  {col}")
    return EXIT_SUCCESS_ALL


def _cmd_extract(args: argparse.Namespace, cfg: AppConfig) -> int:
    logger = setup_logging()
    try:
        api_key = get_api_key()
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    try:
        image = load_image(args.image)
    except (ValueError, OSError) as e:
        logger.error(f"extract: {e}")
        return EXIT_FATAL

    client = GeminiClient(api_key, cfg.ai)
    try:
        table = extract_table_from_image(client, image, args.image.name)
    except (AIError, TableReadError) as e:
        logger.error(f"error during image analysis: {e}")
        return EXIT_PARTIAL_FAILURE

    text = export_table_json(table)
    if args.out is not None:
        args.out.write_text(text, encoding="utf-8")
        logger.info(f"wrote {table.row_count} records to {args.out}")
    else:
        print(text)
    return EXIT_SUCCESS_ALL


def _print_turn(msg: ChatMessage | None) -> None:
    if msg is not None:
        print(f"[BioBot]\n{msg.text}\n", flush=True)


def _cmd_chat(args: argparse.Namespace, cfg: AppConfig) -> int:
    logger = setup_logging()
    try:
        api_key = get_api_key()
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    try:
        table = read_table(args.file, null_sentinels=cfg.null_sentinels or None)
    except TableReadError as e:
        logger.error(f"chat: {e}")
        return EXIT_FATAL

    session = AnalysisSession(
        strict_abundance=cfg.strict_abundance or args.strict_abundance,
        decimals=cfg.decimals,
    )
    session.load_table(table)
    try:
        session.select_columns(args.species, args.abundance)
        session.calculate()
    except BioCitizenError as e:
        logger.error(f"{table.source_name}: {e}")
        return EXIT_PARTIAL_FAILURE

    chat = ChatSession(GeminiClient(api_key, cfg.ai))
    handoff = session.handoff()
    print(f"[User]\n{handoff.seed_text}\n", flush=True)
    _print_turn(chat.seed(handoff))

    # One follow-up question per line until EOF or quit
    for line in sys.stdin:
        prompt = line.strip()
        if prompt.lower() in ("quit", "exit"):
            break
        _print_turn(chat.send(prompt))

    if args.transcript is not None:
        args.transcript.write_text(chat.export_transcript(), encoding="utf-8")
        logger.info(f"wrote chat transcript to {args.transcript}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only None reads sys.argv; [] is an explicit empty argument list
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    load_dotenv(dotenv_path=Path(".env"), override=False)

    if args.debug:
        enable_debug(logger)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "analyze":
        return _cmd_analyze(args, cfg)
    if args.command == "columns":
        return _cmd_columns(args, cfg)
    if args.command == "chat":
        return _cmd_chat(args, cfg)
    return _cmd_extract(args, cfg)
