import logging
from pathlib import Path

import pytest
import tomllib

from config import _write_config, load_config
from logger import get_logger, setup_logging


class TestLoadConfig:
    """Tests for load_config()."""

    def test_missing_file_writes_defaults(self, tmp_path):
        config_path = tmp_path / "spendwell.toml"

        config = load_config(config_path)

        assert config_path.exists()
        assert config.db_filename == "spendwell.db"
        assert config.default_alert_threshold == 80
        assert config.page_size == 9
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        assert data["budgets"]["default_alert_threshold"] == 80

    def test_reads_values(self, tmp_path):
        config_path = tmp_path / "spendwell.toml"
        config_path.write_text(
            f"""
base_dir = "{tmp_path.as_posix()}/data"

[database]
filename = "budget.db"

[logging]
level = "DEBUG"

[budgets]
default_alert_threshold = 90
page_size = 12
"""
        )

        config = load_config(config_path)

        assert config.base_dir == Path(f"{tmp_path.as_posix()}/data")
        assert config.db_path == config.base_dir / "db" / "budget.db"
        assert config.log_level == "DEBUG"
        assert config.log_dir == config.base_dir / "logs"
        assert config.default_alert_threshold == 90
        assert config.page_size == 12

    def test_round_trip(self, tmp_path, test_config):
        config_path = tmp_path / "spendwell.toml"
        test_config.page_size = 5

        _write_config(test_config, config_path)

        assert load_config(config_path) == test_config

    def test_invalid_threshold_raises(self, tmp_path):
        config_path = tmp_path / "spendwell.toml"
        config_path.write_text("[budgets]\ndefault_alert_threshold = 120\n")

        with pytest.raises(ValueError, match="default_alert_threshold"):
            load_config(config_path)

    def test_invalid_page_size_raises(self, tmp_path):
        config_path = tmp_path / "spendwell.toml"
        config_path.write_text("[budgets]\npage_size = 0\n")

        with pytest.raises(ValueError, match="page_size"):
            load_config(config_path)


class TestLogging:
    """Tests for setup_logging()."""

    def test_writes_dated_log_file(self, test_config):
        logger = setup_logging(test_config, console=False)
        try:
            get_logger("services.budgets").info("hello")

            log_files = list(test_config.log_dir.glob("spendwell-*.log"))
            assert len(log_files) == 1
            for handler in logger.handlers:
                handler.flush()
            assert "hello" in log_files[0].read_text()
        finally:
            for handler in logger.handlers:
                handler.close()
            logger.handlers.clear()

    def test_setup_twice_does_not_duplicate_handlers(self, test_config):
        setup_logging(test_config)
        logger = setup_logging(test_config)
        try:
            assert len(logger.handlers) == 2
            assert logger.level == logging.DEBUG
        finally:
            for handler in logger.handlers:
                handler.close()
            logger.handlers.clear()

    def test_child_logger_name(self):
        assert get_logger().name == "spendwell"
        assert get_logger("db.migrator").name == "spendwell.db.migrator"
