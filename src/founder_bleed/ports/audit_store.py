"""Audit storage interface."""

from typing import Protocol

from founder_bleed.core.audit import AuditResult


class AuditStore(Protocol):
    """Interface for persisting audit results."""

    def save(self, audit: AuditResult) -> None:
        """Write/overwrite an audit and its report."""
        ...

    def load(self, audit_id: str) -> AuditResult | None:
        """Load an audit. Returns None if not found."""
        ...

    def read_report(self, audit_id: str) -> str | None:
        """Read the markdown report for an audit. Returns None if not found."""
        ...

    def exists(self, audit_id: str) -> bool:
        """Check if an audit exists."""
        ...

    def list_ids(self) -> list[str]:
        """List stored audit IDs, newest first."""
        ...
