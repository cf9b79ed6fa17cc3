"""
Run Logger - Markdown log of one command execution

One file per run with:
- Table of Contents (filled in on finalize)
- Generated instruction list as a table
- Per-step notes, extracted/refined code blocks
- Final screenshot embedded as an image
"""

import os
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union


class RunLogger:
    """
    Markdown run logger for step-by-step diagnostics.

    Usage:
        run_log = RunLogger(command="Build a pricing page", log_dir="logs")
        run_log.log_heading("Step 1: navigate")
        run_log.log_text("Navigated to https://v0.dev")
        run_log.log_code("html", "<div>...</div>")
        run_log.finalize(success=True, duration_ms=5300)
    """

    TOC_PLACEHOLDER = "<!-- TOC_PLACEHOLDER -->"

    def __init__(
        self,
        command: str,
        url: Optional[str] = None,
        log_dir: Union[str, Path] = "./logs",
        session_id: Optional[str] = None
    ):
        self.session_id = session_id or datetime.now().strftime('%Y%m%d-%H%M%S')
        self.dir = Path(log_dir)
        self.dir.mkdir(parents=True, exist_ok=True)
        self.path = self.dir / f'run-{self.session_id}.md'
        self._toc: List[str] = []

        with open(self.path, 'w', encoding='utf-8') as f:
            f.write(f"# uiforge Run Log ({self.session_id})\n\n")
            f.write("## Navigation\n\n")
            f.write(self.TOC_PLACEHOLDER + "\n\n")
            if url:
                f.write(f"- **Builder**: {url}\n")
            f.write(f"- **Command**: {command}\n\n")

    def _write(self, text: str):
        with open(self.path, 'a', encoding='utf-8') as f:
            f.write(text)

    def log_heading(self, text: str):
        self._write("\n---\n\n")
        self._write(f"## {text}\n\n")
        self._toc.append(text)

    def log_text(self, text: str):
        self._write(f"{text}\n\n")

    def log_code(self, lang: str, code: str):
        self._write(f"```{lang}\n{code}\n```\n\n")

    def log_image(self, image_path: Union[str, Path], alt: str = ""):
        """Embed an image using a path relative to the log directory."""
        img = Path(image_path)
        rel = os.path.relpath(img.resolve(), start=self.dir.resolve())
        self._write(f"![{alt or img.name}]({rel})\n\n")

    def log_table(self, headers: List[str], rows: List[List[str]], title: str = ""):
        if title:
            self._write(f"### {title}\n\n")
        if not headers or not rows:
            return

        col_widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row[:len(headers)]):
                col_widths[i] = max(col_widths[i], len(str(cell)))

        header_line = "| " + " | ".join(h.ljust(col_widths[i]) for i, h in enumerate(headers)) + " |"
        self._write(header_line + "\n")
        self._write("|" + "|".join("-" * (w + 2) for w in col_widths) + "|\n")
        for row in rows:
            padded_row = list(row) + [""] * (len(headers) - len(row))
            cells = (str(c).replace("|", "\\|").ljust(col_widths[i]) for i, c in enumerate(padded_row[:len(headers)]))
            self._write("| " + " | ".join(cells) + " |\n")
        self._write("\n")

    def log_warning(self, message: str):
        self._write(f"⚠️ **WARNING:** {message}\n\n")

    def log_error(self, message: str):
        self._write(f"❌ **ERROR:** {message}\n\n")

    def finalize(self, success: bool, duration_ms: int = 0, error: Optional[str] = None):
        """Write the summary section and fill in the table of contents."""
        self.log_heading("Summary")
        status = "✅ SUCCESS" if success else "❌ FAILED"
        self._write(f"**Status:** {status}\n")
        self._write(f"**Duration:** {duration_ms}ms\n")
        if error:
            self._write(f"\n**Error:** {error}\n")
        self._write("\n")
        self._update_toc()

    def _slugify(self, text: str) -> str:
        s = text.strip().lower()
        s = re.sub(r"[^a-z0-9\s-]", "", s)
        s = re.sub(r"\s+", "-", s)
        return s

    def _update_toc(self):
        content = self.path.read_text(encoding='utf-8')
        toc_md = "\n".join(f"- [{title}](#{self._slugify(title)})" for title in self._toc)
        content = content.replace(self.TOC_PLACEHOLDER, toc_md or "(no sections)", 1)
        self.path.write_text(content, encoding='utf-8')

    @property
    def log_path(self) -> str:
        return str(self.path)
