"""
Writes a self-contained static analysis page:
- copies the prebuilt frontend (public dir) into the output directory
- drops rolldown-data.json next to it
"""
import shutil
from pathlib import Path

from rolldown_analyzer.agent.engine import generate_data
from rolldown_analyzer.analyzers.logger_config import setup_logger
from rolldown_analyzer.config import DATA_FILE_NAME
from rolldown_analyzer.errors import ConfigurationError

logger = setup_logger(__name__)


def write_data_file(data, out_file) -> Path:
    out_file = Path(out_file)
    out_file.parent.mkdir(parents=True, exist_ok=True)
    data.write(out_file)
    return out_file


def generate_template(logs_path, meta_path, out_dir, public_dir) -> Path:
    public_dir = Path(public_dir)
    if not public_dir.is_dir():
        raise ConfigurationError(f"frontend directory not found: {public_dir}")

    data = generate_data(logs_path, meta_path)

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    shutil.copytree(public_dir, out_dir, dirs_exist_ok=True)
    logger.debug(f"Copied frontend from {public_dir} to {out_dir}.")

    return write_data_file(data, out_dir / DATA_FILE_NAME)
