#!/usr/bin/env python3
from dataclasses import dataclass
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

DEFAULT_COMMAND = (
    "Open the UI builder, ask it to generate a pricing page with three plans, "
    "extract the generated code and make it responsive"
)


@dataclass
class Config:
    """Application configuration"""
    builder_url: str = os.getenv("UIFORGE_BUILDER_URL", "https://v0.dev")
    default_command: str = os.getenv("UIFORGE_DEFAULT_COMMAND", DEFAULT_COMMAND)
    headless: bool = os.getenv("UIFORGE_HEADLESS", "false").lower() == "true"
    artifact_dir: Path = Path(os.getenv("UIFORGE_ARTIFACT_DIR", "./artifacts"))
    log_dir: Path = Path(os.getenv("UIFORGE_LOG_DIR", "./logs"))

    # Step timing (milliseconds)
    navigate_settle_ms: int = int(os.getenv("UIFORGE_NAVIGATE_SETTLE_MS", "2000"))
    type_settle_ms: int = int(os.getenv("UIFORGE_TYPE_SETTLE_MS", "1000"))
    click_settle_ms: int = int(os.getenv("UIFORGE_CLICK_SETTLE_MS", "1000"))
    click_timeout_ms: int = int(os.getenv("UIFORGE_CLICK_TIMEOUT_MS", "5000"))
    extract_timeout_ms: int = int(os.getenv("UIFORGE_EXTRACT_TIMEOUT_MS", "10000"))


config = Config()
