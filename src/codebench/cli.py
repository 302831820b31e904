"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import logging as py_logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from .errors import CodebenchError, ExitCode, user_facing_error
from .logging import configure_logging, default_log_path

_VALID_THEMES = ("dark", "light")
_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


def _log_level_type(value: str) -> str:
    normalized = value.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def _file_name_type(value: str) -> str:
    name = value.strip()
    if not name:
        raise argparse.ArgumentTypeError("--file must not be empty")
    return name


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="codebench")
    parser.add_argument("--theme", choices=_VALID_THEMES, default=None)
    parser.add_argument("--terminal", action="store_true", help="Open with the terminal panel visible")
    parser.add_argument("--preview", action="store_true", help="Open with the live preview visible")
    parser.add_argument(
        "--file",
        dest="files",
        action="append",
        type=_file_name_type,
        default=[],
        help="Create an empty file in the workspace (repeatable)",
    )
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument(
        "--run",
        type=Path,
        default=None,
        help="Run a source file headlessly and print terminal output",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Assemble the workbench without a window and exit",
    )
    parser.add_argument("--log-level", type=_log_level_type, default="INFO")
    parser.add_argument("--log-file", type=Path, default=None)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    return parser.parse_args(argv)


def launch_gui(namespace: argparse.Namespace) -> int:
    from codebench.ui.app import launch_app

    return launch_app(
        config_path=namespace.config,
        theme=namespace.theme,
        show_terminal=True if namespace.terminal else None,
        show_preview=True if namespace.preview else None,
        seed_files=namespace.files,
    )


def run_check_flow(namespace: argparse.Namespace) -> int:
    from codebench.config import load_config
    from codebench.ui.app import apply_overrides, build_headless_workbench
    from codebench.ui.state import build_state_from_config

    config = load_config(namespace.config)
    state = apply_overrides(
        build_state_from_config(config),
        theme=namespace.theme,
        seed_files=namespace.files,
    )
    workbench, _scheduler = build_headless_workbench(config, state)
    workbench.shutdown()
    return int(ExitCode.SUCCESS)


def run_file_flow(namespace: argparse.Namespace) -> int:
    from codebench.config import load_config
    from codebench.execution import OutcomeStatus
    from codebench.ui.app import run_file_headless

    config = load_config(namespace.config)
    outcome = run_file_headless(namespace.run, config=config, stream=sys.stdout)
    if outcome is not None and outcome.status == OutcomeStatus.ERROR:
        return int(ExitCode.RUNTIME_ERROR)
    return int(ExitCode.SUCCESS)


def main(
    argv: Sequence[str] | None = None,
    *,
    gui_launcher: Callable[[argparse.Namespace], int | None] | None = None,
) -> int:
    log_path = default_log_path()
    logger = configure_logging(log_file=log_path)
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()
    logger = configure_logging(level=namespace.log_level, log_file=log_path)

    try:
        if namespace.run is not None:
            logger.debug("Starting headless run flow")
            return run_file_flow(namespace)

        if namespace.check:
            logger.debug("Starting check flow")
            return run_check_flow(namespace)

        launcher = gui_launcher or launch_gui
        logger.debug("Starting GUI flow")
        result = launcher(namespace)
        if isinstance(result, int):
            return result
        return int(ExitCode.SUCCESS)
    except CodebenchError as exc:
        logger.error(
            "Handled CodebenchError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        try:
            hint = f"Inspect logs: {log_path}"
            print(user_facing_error("Unexpected runtime failure", hint=hint), file=sys.stderr)
        except Exception:
            pass
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
