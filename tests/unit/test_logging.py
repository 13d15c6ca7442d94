"""Unit tests for logging setup."""

import json

import pytest
from loguru import logger

from debugexpr.evaluation import ExprEvaluator
from debugexpr.utils.logging import get_logger, normalize_level, setup_logging


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger.remove()


class TestNormalizeLevel:
    """Test level name validation."""

    def test_case_insensitive(self):
        assert normalize_level("debug") == "DEBUG"
        assert normalize_level(" Warning ") == "WARNING"

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            normalize_level("LOUD")

    def test_setup_rejects_unknown_level(self):
        with pytest.raises(ValueError):
            setup_logging(level="LOUD")


class TestSetupLogging:
    """Test where records go."""

    def test_log_file_records_module(self, tmp_path):
        log_file = tmp_path / "logs" / "session.log"
        setup_logging(level="DEBUG", log_file=log_file)

        ExprEvaluator().expr("1 +")
        logger.complete()

        text = log_file.read_text()
        assert "debugexpr.tokenization.tokenizer" in text
        assert "WARNING" in text
        assert "cannot evaluate '1 +'" in text

    def test_level_filters_file(self, tmp_path):
        log_file = tmp_path / "session.log"
        setup_logging(level="WARNING", log_file=log_file)

        ExprEvaluator().expr("1+2")
        logger.complete()

        assert "DEBUG" not in log_file.read_text()

    def test_json_output(self, capsys):
        setup_logging(level="INFO", json_output=True)

        get_logger("debugexpr.test").info("hello")
        logger.complete()

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["record"]["message"] == "hello"
        assert record["record"]["extra"]["module"] == "debugexpr.test"
