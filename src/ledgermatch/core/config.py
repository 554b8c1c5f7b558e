#!/usr/bin/env python3
"""
Configuration Management for ledgermatch

Environment-based configuration with an optional YAML file layered on top.
Supports multiple environments (development, test, production).
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class YNABConfig:
    """Ledger (YNAB) collaborator configuration."""

    budget_id: str | None = None
    cli_command: str = "ynab"
    timeout: int = 30


@dataclass
class MatchingConfig:
    """Matching engine settings that are safe to tune per household."""

    retailers: list = field(default_factory=lambda: ["amazon", "walmart"])
    retailers_file: Path | None = None
    memo_history_threshold: int = 100


@dataclass
class Config:
    """
    Main configuration class.

    Loads configuration from environment variables, then applies any values
    found in the YAML file named by LEDGERMATCH_CONFIG.
    """

    environment: Environment

    data_dir: Path
    cache_dir: Path
    output_dir: Path
    processed_file: Path

    ynab: YNABConfig
    matching: MatchingConfig

    dry_run: bool = True
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables and optional YAML file."""
        env = Environment(os.getenv("LEDGERMATCH_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_ledgermatch"
            base_dir = Path(os.getenv("LEDGERMATCH_DATA_DIR", str(default_test_dir)))
        else:
            base_dir = Path(os.getenv("LEDGERMATCH_DATA_DIR", "./data")).expanduser().resolve()

        data_dir = base_dir
        cache_dir = data_dir / "cache"
        output_dir = data_dir / "results"

        for directory in [data_dir, cache_dir, output_dir]:
            directory.mkdir(parents=True, exist_ok=True)

        processed_file = Path(
            os.getenv("LEDGERMATCH_PROCESSED_FILE", str(cache_dir / "processed_transactions.json"))
        )

        ynab = YNABConfig(
            budget_id=os.getenv("YNAB_BUDGET_ID"),
            cli_command=os.getenv("YNAB_CLI", "ynab"),
            timeout=int(os.getenv("YNAB_TIMEOUT", "30")),
        )

        retailers_file = os.getenv("LEDGERMATCH_RETAILERS_FILE")
        matching = MatchingConfig(
            retailers=_parse_list(os.getenv("LEDGERMATCH_RETAILERS", "amazon,walmart")),
            retailers_file=Path(retailers_file) if retailers_file else None,
            memo_history_threshold=int(os.getenv("LEDGERMATCH_MEMO_THRESHOLD", "100")),
        )

        config = cls(
            environment=env,
            data_dir=data_dir,
            cache_dir=cache_dir,
            output_dir=output_dir,
            processed_file=processed_file,
            ynab=ynab,
            matching=matching,
            dry_run=os.getenv("LEDGERMATCH_DRY_RUN", "true").lower() == "true",
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

        config_file = os.getenv("LEDGERMATCH_CONFIG")
        if config_file:
            config.apply_yaml(Path(config_file))

        return config

    def apply_yaml(self, path: Path) -> None:
        """
        Override settings with values from a YAML document.

        Recognized layout::

            app:
              dry_run: false
              log_level: DEBUG
              processed_transactions_file: data/processed.json
            ynab:
              budget_id: abc123
            matching:
              retailers: [amazon]
              retailers_file: retailers.yml

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the document is not a mapping
        """
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}

        if not isinstance(document, dict):
            raise ValueError(f"Configuration file must contain a mapping: {path}")

        app = document.get("app") or {}
        if "dry_run" in app:
            self.dry_run = bool(app["dry_run"])
        if "log_level" in app:
            self.log_level = str(app["log_level"]).upper()
        if "processed_transactions_file" in app:
            self.processed_file = Path(app["processed_transactions_file"])

        ynab = document.get("ynab") or {}
        if "budget_id" in ynab:
            self.ynab.budget_id = ynab["budget_id"]
        if "cli_command" in ynab:
            self.ynab.cli_command = ynab["cli_command"]
        if "timeout" in ynab:
            self.ynab.timeout = int(ynab["timeout"])

        matching = document.get("matching") or {}
        if "retailers" in matching:
            retailers = matching["retailers"]
            self.matching.retailers = (
                _parse_list(retailers) if isinstance(retailers, str) else [str(r) for r in retailers]
            )
        if "retailers_file" in matching:
            self.matching.retailers_file = Path(matching["retailers_file"])
        if "memo_history_threshold" in matching:
            self.matching.memo_history_threshold = int(matching["memo_history_threshold"])

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        for name, path in [
            ("data_dir", self.data_dir),
            ("cache_dir", self.cache_dir),
            ("output_dir", self.output_dir),
        ]:
            if not path.exists():
                errors.append(f"{name} does not exist: {path}")

        if not self.matching.retailers:
            errors.append("No retailer order source configured (LEDGERMATCH_RETAILERS is empty)")

        if self.matching.retailers_file and not self.matching.retailers_file.exists():
            errors.append(f"Retailers file does not exist: {self.matching.retailers_file}")

        if self.environment == Environment.PRODUCTION and not self.dry_run and not self.ynab.budget_id:
            errors.append("YNAB_BUDGET_ID is required to apply updates in production")

        if self.ynab.timeout <= 0:
            errors.append("YNAB timeout must be positive")
        if self.matching.memo_history_threshold <= 0:
            errors.append("Memo history threshold must be positive")

        return errors

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

        if self.environment == Environment.PRODUCTION:
            logging.getLogger("urllib3").setLevel(logging.WARNING)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a JSON-friendly dictionary."""
        return {
            "environment": self.environment.value,
            "data_dir": str(self.data_dir),
            "cache_dir": str(self.cache_dir),
            "output_dir": str(self.output_dir),
            "processed_file": str(self.processed_file),
            "dry_run": self.dry_run,
            "debug": self.debug,
            "log_level": self.log_level,
            "ynab": {
                "budget_id": "***REDACTED***" if self.ynab.budget_id else None,
                "cli_command": self.ynab.cli_command,
                "timeout": self.ynab.timeout,
            },
            "matching": {
                "retailers": list(self.matching.retailers),
                "retailers_file": str(self.matching.retailers_file) if self.matching.retailers_file else None,
                "memo_history_threshold": self.matching.memo_history_threshold,
            },
        }


def _parse_list(value: str, delimiter: str = ",") -> list:
    """Parse comma-separated string into list, handling empty values."""
    if not value:
        return []
    return [item.strip() for item in value.split(delimiter) if item.strip()]


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Raises:
        ValueError: If the configuration fails validation
    """
    global _config
    if _config is None:
        config = Config.from_environment()

        errors = config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        config.setup_logging()
        _config = config

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()


def get_data_dir() -> Path:
    return get_config().data_dir


def is_test() -> bool:
    return get_config().environment == Environment.TEST
