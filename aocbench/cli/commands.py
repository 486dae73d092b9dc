# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the aocbench CLI.

Each handler takes the parsed argparse namespace and returns an exit code.
Diagnostics go through the structured logger, which the CLI points at
stderr. stdout carries only the tally report, or for `run` the day's own
output.
"""

import argparse
import contextlib
import logging
import os
import sys
from pathlib import Path
from typing import Iterator, Optional

from aocbench.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, USER_ERROR, VALIDATION_ERROR
from aocbench.config.exceptions import ConfigError
from aocbench.config.loader import load_config
from aocbench.config.schema import AocBenchConfig, TallyConfig
from aocbench.languages.registry import build_registry
from aocbench.logging.logger import get_logger
from aocbench.reference.client import AocClient, token_from_env
from aocbench.reference.source import (
    CachedReferenceSource,
    InputSource,
    OfflineReferenceSource,
    ReferenceSource,
    ReferenceUnavailableError,
)
from aocbench.runtime.bootstrap import bootstrap
from aocbench.tally.discovery.scanner import discover_units
from aocbench.tally.exceptions import AnswerMismatchError, TallyError, UnitRunError
from aocbench.tally.pipeline import run_pipeline
from aocbench.tally.reporting.writer import format_report_text, write_report
from aocbench.tally.selection import find_batch_root, parse_day_list, select_days, year_from_path
from aocbench.tally.single import check_answers, run_day

DEFAULT_TOOLCHAIN_FILE = ".languages.yaml"
TIME_UNIT_ENV_VAR = "TASKUNIT"


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, Optional[AocBenchConfig], logging.Logger]:
    """
    The shared setup every command needs: load config, run bootstrap.

    Returns (exit_code, config, logger). If exit_code is not SUCCESS the
    caller should return it straight away.
    """
    logger = get_logger(f"aocbench.cli.{command_name}", log_level=args.log_level or "INFO")

    config = None
    if args.config is not None:
        try:
            config = load_config(Path(args.config))
        except ConfigError as err:
            logger.error(
                "Configuration error",
                extra={"command": command_name, "error": str(err)},
            )
            return CONFIG_ERROR, None, logger

    bootstrap(config.global_config if config is not None else None, log_level=args.log_level)
    if config is None:
        logger.debug(
            "No config provided, running with defaults",
            extra={"command": command_name},
        )

    return SUCCESS, config, logger


def _tally_config(config: Optional[AocBenchConfig]) -> TallyConfig:
    if config is not None and config.tally is not None:
        return config.tally
    return TallyConfig()


def _resolve_root(args: argparse.Namespace) -> Path:
    if args.root is not None:
        return Path(args.root).resolve()
    return find_batch_root(Path.cwd())


def _resolve_days(args: argparse.Namespace, root: Path, tally_config: TallyConfig) -> list[int]:
    explicit = parse_day_list(args.days) if args.days is not None else tally_config.days
    return select_days(year_from_path(root), explicit)


def _resolve_toolchain_file(root: Path, tally_config: TallyConfig) -> Path:
    if tally_config.toolchain_file is not None:
        return root / tally_config.toolchain_file
    return root / DEFAULT_TOOLCHAIN_FILE


@contextlib.contextmanager
def _reference_sources(
    root: Path,
    tally_config: TallyConfig,
) -> Iterator[tuple[ReferenceSource, Optional[InputSource]]]:
    """Answers come from the cache, and from the website too when fetching is on."""
    cache_dir = root / tally_config.cache_directory
    if not tally_config.fetch_missing:
        yield OfflineReferenceSource(cache_dir), None
        return

    with AocClient(year_from_path(root), token=token_from_env()) as client:
        yield CachedReferenceSource(client, cache_dir), client


def _config_snapshot(config: Optional[AocBenchConfig], tally_config: TallyConfig) -> dict[str, object]:
    if config is not None:
        return config.model_dump(by_alias=True)
    return {"tally": tally_config.model_dump()}


def handle_tally(args: argparse.Namespace) -> int:
    """Build, run and benchmark the selected days and print the report."""
    exit_code, config, logger = _load_and_bootstrap(args, "tally")
    if exit_code != SUCCESS:
        return exit_code

    tally_config = _tally_config(config)

    try:
        root = _resolve_root(args)
        days = _resolve_days(args, root, tally_config)
    except TallyError as err:
        logger.error("Cannot select days", extra={"error": str(err)})
        return USER_ERROR

    runs = args.runs if args.runs is not None else tally_config.runs
    if runs < 1:
        logger.error("--runs must be at least 1", extra={"runs": runs})
        return USER_ERROR

    max_workers = args.max_workers if args.max_workers is not None else tally_config.max_workers
    time_unit = os.environ.get(TIME_UNIT_ENV_VAR) or tally_config.time_unit

    logger.info(
        "Starting tally",
        extra={"root": str(root), "days": days, "runs": runs, "dry_run": args.dry_run},
    )

    try:
        registry = build_registry(_resolve_toolchain_file(root, tally_config))

        if args.dry_run:
            units = discover_units(root, days)
            logger.info(
                "Dry run: would tally days",
                extra={
                    "days": [u.index for u in units],
                    "languages": sorted(registry.extensions()),
                },
            )
            return SUCCESS

        with _reference_sources(root, tally_config) as (reference_source, input_source):
            report = run_pipeline(
                root,
                days,
                runs,
                registry=registry,
                reference_source=reference_source,
                input_source=input_source,
                max_workers=max_workers,
                release=tally_config.release,
                compile_timeout_seconds=tally_config.compile_timeout_seconds,
                run_timeout_seconds=tally_config.run_timeout_seconds,
                time_unit=time_unit,
            )

        output_dir = args.output_dir or tally_config.output_directory
        if output_dir is not None:
            write_report(report, Path(output_dir), _config_snapshot(config, tally_config))

        sys.stdout.write(format_report_text(report))
        sys.stdout.flush()
        return SUCCESS

    except ConfigError as err:
        logger.error("Configuration error", extra={"command": "tally", "error": str(err)})
        return CONFIG_ERROR
    except TallyError as err:
        logger.error("Tally aborted", extra={"error": str(err)})
        return USER_ERROR
    except FileNotFoundError as err:
        logger.error("File not found", extra={"error": str(err)})
        return VALIDATION_ERROR
    except Exception as err:
        logger.error("Tally failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_discover(args: argparse.Namespace) -> int:
    """Log which folder each selected day maps to."""
    exit_code, config, logger = _load_and_bootstrap(args, "discover")
    if exit_code != SUCCESS:
        return exit_code

    tally_config = _tally_config(config)

    try:
        root = _resolve_root(args)
        days = _resolve_days(args, root, tally_config)
        units = discover_units(root, days)
    except TallyError as err:
        logger.error("Discovery failed", extra={"error": str(err)})
        return USER_ERROR

    found = {unit.index for unit in units}
    for unit in units:
        logger.info("Day found", extra={"day": unit.index, "folder": str(unit.folder)})

    missing = [day for day in days if day not in found]
    if missing:
        logger.warning("Days without a folder", extra={"days": missing})

    return SUCCESS


def handle_run(args: argparse.Namespace) -> int:
    """Run one day with its output on the terminal, optionally checking the answers."""
    exit_code, config, logger = _load_and_bootstrap(args, "run")
    if exit_code != SUCCESS:
        return exit_code

    tally_config = _tally_config(config)

    try:
        root = _resolve_root(args)
        (day,) = select_days(year_from_path(root), [args.day])
    except TallyError as err:
        logger.error("Cannot select day", extra={"error": str(err)})
        return USER_ERROR

    if args.dry_run:
        logger.info("Dry run: would run day", extra={"root": str(root), "day": day})
        return SUCCESS

    try:
        registry = build_registry(_resolve_toolchain_file(root, tally_config))
        with _reference_sources(root, tally_config) as (reference_source, input_source):
            result = run_day(
                root,
                day,
                registry,
                input_source=input_source,
                release=tally_config.release,
            )
            sys.stdout.flush()
            if args.assert_answers:
                check_answers(result, reference_source.get_info(day))
        return SUCCESS

    except UnitRunError as err:
        logger.error(
            "Day failed",
            extra={"day": day, "kind": err.kind.value, "detail": err.detail},
        )
        return RUNTIME_ERROR
    except AnswerMismatchError as err:
        logger.error("Wrong answer", extra={"day": day, "error": str(err)})
        return VALIDATION_ERROR
    except ReferenceUnavailableError as err:
        logger.error("No accepted answers to check against", extra={"day": day, "error": str(err)})
        return RUNTIME_ERROR
    except ConfigError as err:
        logger.error("Configuration error", extra={"command": "run", "error": str(err)})
        return CONFIG_ERROR
    except TallyError as err:
        logger.error("Run aborted", extra={"error": str(err)})
        return USER_ERROR
    except Exception as err:
        logger.error("Run failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR
