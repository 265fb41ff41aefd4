"""
Keyspace Result Models

Plain dataclasses exchanged between the keyspace services and the HTTP
layer. Field names of the serialized forms follow the browser client's wire
format (camelCase meta keys).
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SessionTarget:
    """Which saved connection, and which database on it, a request addresses."""

    connection_id: str
    db: int | None = None


@dataclass(frozen=True)
class KeyInfo:
    """One scanned key and its type ("unknown" when the type lookup failed)."""

    key: str
    type: str

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "type": self.type}


@dataclass
class ValuePreview:
    """
    Uniform inspection result.

    Attributes:
        type: native type, or "hyperloglog" after reclassification
        value: bounded preview of the value (shape depends on type)
        ttl: seconds to expiry; -1 no expiry, -2 missing key
        meta: always contains memoryBytes; paginated types add
              total/previewCount/truncated and their resume position
    """

    type: str
    value: Any
    ttl: int
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def truncated(self) -> bool:
        return bool(self.meta.get("truncated", False))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "value": self.value, "ttl": self.ttl, "meta": self.meta}
