"""File-based audit storage adapter."""

import json
import logging
from pathlib import Path

from founder_bleed.core.audit import AuditResult
from founder_bleed.core.report import format_audit_markdown

logger = logging.getLogger(__name__)


class FileAuditStore:
    """
    File-based audit storage.

    Implements AuditStore protocol. Each audit gets a JSON file with the full
    result and a markdown file with the rendered report.
    """

    def __init__(self, audits_dir: Path | str):
        self.audits_dir = Path(audits_dir).expanduser()
        self.audits_dir.mkdir(parents=True, exist_ok=True)

    def _json_path(self, audit_id: str) -> Path:
        return self.audits_dir / f"{audit_id}.json"

    def _report_path(self, audit_id: str) -> Path:
        return self.audits_dir / f"{audit_id}.md"

    def save(self, audit: AuditResult) -> None:
        """Write/overwrite an audit and its report."""
        self._json_path(audit.audit_id).write_text(json.dumps(audit.to_dict(), indent=2))
        self._report_path(audit.audit_id).write_text(format_audit_markdown(audit))

    def load(self, audit_id: str) -> AuditResult | None:
        """Load an audit. Returns None if not found or unreadable."""
        path = self._json_path(audit_id)
        if not path.exists():
            return None
        try:
            return AuditResult.from_dict(json.loads(path.read_text()))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Failed to read audit {audit_id}: {e}")
            return None

    def read_report(self, audit_id: str) -> str | None:
        """Read the markdown report for an audit. Returns None if not found."""
        path = self._report_path(audit_id)
        if not path.exists():
            return None
        return path.read_text()

    def exists(self, audit_id: str) -> bool:
        """Check if an audit exists."""
        return self._json_path(audit_id).exists()

    def list_ids(self) -> list[str]:
        """List stored audit IDs, newest first."""
        paths = sorted(
            self.audits_dir.glob("*.json"),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        return [p.stem for p in paths]
