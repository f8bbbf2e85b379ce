"""
Runtime configuration read from the environment.

- LOGS_PATH / META_PATH: inputs for the `prepare` command
- ROLLDOWN_ANALYZER_PUBLIC_DIR: prebuilt frontend copied by `generate`
- ROLLDOWN_ANALYZER_LOG_LEVEL / ROLLDOWN_ANALYZER_LOG_FILE: see analyzers/logger_config.py
"""
import os
from dataclasses import dataclass
from pathlib import Path

from rolldown_analyzer.errors import ConfigurationError

DATA_FILE_NAME = "rolldown-data.json"
DEFAULT_PUBLIC_DIR = Path(__file__).resolve().parent / "public"


@dataclass
class AnalyzerConfig:
    logs_path: Path | None = None
    meta_path: Path | None = None
    public_dir: Path = DEFAULT_PUBLIC_DIR
    data_file_name: str = DATA_FILE_NAME

    @classmethod
    def from_env(cls, environ=None) -> "AnalyzerConfig":
        environ = os.environ if environ is None else environ
        logs_path = environ.get("LOGS_PATH")
        meta_path = environ.get("META_PATH")
        public_dir = environ.get("ROLLDOWN_ANALYZER_PUBLIC_DIR")
        return cls(
            logs_path=Path(logs_path) if logs_path else None,
            meta_path=Path(meta_path) if meta_path else None,
            public_dir=Path(public_dir) if public_dir else DEFAULT_PUBLIC_DIR,
        )

    def require_inputs(self) -> tuple[Path, Path]:
        if self.logs_path is None or self.meta_path is None:
            raise ConfigurationError("LOGS_PATH and META_PATH are required")
        return self.logs_path, self.meta_path
