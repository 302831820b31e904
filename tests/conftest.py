from __future__ import annotations

import logging as py_logging
from pathlib import Path

import pytest

from codebench.logging import LOGGER_NAME


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    del config
    for item in items:
        path = Path(str(getattr(item, "path", item.fspath)))

        if "integration" in path.parts:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)

        if "performance" in path.parts:
            item.add_marker(pytest.mark.performance)


@pytest.fixture(autouse=True)
def _propagate_codebench_logs() -> None:
    # CLI tests configure a non-propagating logger; caplog needs propagation.
    logger = py_logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(py_logging.NOTSET)
