from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    return datetime.fromisoformat(str(value))


@dataclass(frozen=True)
class Worker:
    """Domain entity: a person whose work and payments are tracked.

    ``worker_id`` is chosen by the user and can be renamed; ``renamed_from``
    remembers the previous id while (and after) a rename cascade runs.
    """

    worker_id: str
    name: str
    job_role: str
    created_at: Optional[datetime] = None
    renamed_from: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "name": self.name,
            "jobRole": self.job_role,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if self.renamed_from:
            doc["renamedFrom"] = self.renamed_from
        return doc

    @classmethod
    def from_document(cls, worker_id: str, doc: Dict[str, Any]) -> "Worker":
        return cls(
            worker_id=worker_id,
            name=str(doc.get("name", "")),
            job_role=str(doc.get("jobRole", "")),
            created_at=_parse_timestamp(doc.get("createdAt")),
            renamed_from=doc.get("renamedFrom") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.worker_id,
            "name": self.name,
            "jobRole": self.job_role,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
