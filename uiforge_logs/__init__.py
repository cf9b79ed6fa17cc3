"""
uiforge_logs - Markdown run logs for uiforge

Usage:
    from uiforge_logs import RunLogger

    run_log = RunLogger(command="Build a login form", log_dir="logs")
    run_log.log_heading("Step 1: navigate")
    run_log.finalize(success=True)
"""

from .run_logger import RunLogger

__all__ = ['RunLogger']

__version__ = '1.0.0'
