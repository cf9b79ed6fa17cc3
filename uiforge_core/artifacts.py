"""
Artifact store - extracted and refined code written to disk per run.

Layout:
artifacts/
└── run-YYYYMMDD-HHMMSS-ffffff/
    ├── extracted_code.html
    ├── refined_code_iteration_1.html
    ├── refined_code_iteration_2.html
    └── final_screenshot.png
"""
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional, Union
import shutil

from .config import config
from .diagnostics import get_logger

logger = get_logger(__name__)

EXTRACTED_NAME = "extracted_code.html"
ITERATION_TEMPLATE = "refined_code_iteration_{n}.html"
SCREENSHOT_NAME = "final_screenshot.png"


def new_run_id() -> str:
    return datetime.now().strftime('%Y%m%d-%H%M%S-%f')


def new_run_dir(base_dir: Optional[Union[str, Path]] = None) -> Path:
    """
    Create a run directory that no earlier run has used.

    The run ID is the directory name without its "run-" prefix; a "-2", "-3"...
    suffix is added if the timestamped name is already taken.
    """
    base = Path(base_dir) if base_dir else config.artifact_dir
    base.mkdir(parents=True, exist_ok=True)
    run_id = new_run_id()
    candidate, n = run_id, 1
    while True:
        run_dir = base / f"run-{candidate}"
        try:
            run_dir.mkdir()
            return run_dir
        except FileExistsError:
            n += 1
            candidate = f"{run_id}-{n}"


class ArtifactStore:
    """Writes code artifacts into a single run directory."""

    def __init__(self, run_dir: Union[str, Path]):
        self.run_dir = Path(run_dir)
        self.run_dir.mkdir(parents=True, exist_ok=True)

    def _write(self, name: str, code: str) -> Path:
        path = self.run_dir / name
        path.write_text(code, encoding="utf-8")
        logger.info(f"Artifact saved: {path}")
        return path

    def save_extraction(self, code: str) -> Path:
        return self._write(EXTRACTED_NAME, code)

    def save_iteration(self, iteration: int, code: str) -> Path:
        return self._write(ITERATION_TEMPLATE.format(n=iteration), code)

    def screenshot_path(self) -> Path:
        return self.run_dir / SCREENSHOT_NAME


def cleanup_old_runs(max_age_days: int = 7, base_dir: Optional[Union[str, Path]] = None) -> int:
    """
    Remove run directories older than max_age_days.

    Returns:
        Number of directories removed
    """
    base = Path(base_dir) if base_dir else config.artifact_dir
    if not base.exists():
        return 0

    cutoff = datetime.now() - timedelta(days=max_age_days)
    removed_count = 0

    for run_dir in base.glob("run-*"):
        if not run_dir.is_dir():
            continue
        mtime = datetime.fromtimestamp(run_dir.stat().st_mtime)
        if mtime < cutoff:
            try:
                shutil.rmtree(run_dir)
                removed_count += 1
                logger.info(f"Removed old run dir: {run_dir}")
            except OSError as e:
                logger.warning(f"Failed to remove {run_dir}: {e}")

    return removed_count
