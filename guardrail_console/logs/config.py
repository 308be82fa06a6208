"""Configuration models for guardrail console logging."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

VALID_FORMATS = ("standard", "json", "colored")


class ConsoleOutputConfig(BaseModel):
    """Configuration for console output."""

    enabled: bool = Field(default=True, description="Enable console output")
    level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    format: str = Field(default="standard", description="Format: standard, json, colored")


class FileOutputConfig(BaseModel):
    """Configuration for file output."""

    path: str = Field(default="logs/guardrail-console.log", description="Path to log file")
    level: str = Field(default="DEBUG", description="Log level")
    max_bytes: int = Field(default=10_000_000, description="Max bytes per file (10MB)")
    backup_count: int = Field(default=3, description="Number of backup files to keep")


class LogConfig(BaseModel):
    """Complete logging configuration."""

    console: ConsoleOutputConfig = Field(default_factory=ConsoleOutputConfig)
    file: Optional[FileOutputConfig] = Field(default=None, description="File output; disabled when None")
    global_level: str = Field(default="INFO", description="Global log level")

    @classmethod
    def from_yaml(cls, path: str) -> "LogConfig":
        """Load config from the `logging:` section of a YAML file."""
        config_path = Path(path)
        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            yaml_data = yaml.safe_load(f) or {}

        return cls(**(yaml_data.get("logging") or {}))

    def apply_env(self) -> "LogConfig":
        """Override fields from GUARDRAIL_LOG_* environment variables."""
        level = os.environ.get("GUARDRAIL_LOG_LEVEL")
        if level:
            self.global_level = level
            self.console.level = level

        fmt = os.environ.get("GUARDRAIL_LOG_FORMAT")
        if fmt and fmt.lower() in VALID_FORMATS:
            self.console.format = fmt.lower()

        log_file = os.environ.get("GUARDRAIL_LOG_FILE")
        if log_file:
            if self.file is None:
                self.file = FileOutputConfig()
            self.file.path = log_file

        return self

    @classmethod
    def from_env(cls) -> "LogConfig":
        """Load config from environment variables only."""
        return cls().apply_env()


def load_config(config_path: Optional[str] = None) -> LogConfig:
    """Load logging configuration (priority: env vars > YAML > defaults)."""
    config = LogConfig.from_yaml(config_path) if config_path else LogConfig()
    return config.apply_env()
