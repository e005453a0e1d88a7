import json
import sys

import pytest
from loguru import logger

from src.logging_config import setup_logging


@pytest.fixture(autouse=True)
def restore_default_sink():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_production_logs_are_json(capsys):
    setup_logging("production", "INFO")
    logger.info("Rotation configured with 4 sources")

    line = capsys.readouterr().out.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["record"]["message"] == "Rotation configured with 4 sources"
    assert record["record"]["level"]["name"] == "INFO"


def test_level_filters_debug(capsys):
    setup_logging("development", "INFO")
    logger.debug("hidden")
    logger.warning("shown")

    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "shown" in err
