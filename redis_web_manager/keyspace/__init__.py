"""
Keyspace Services

Read and write operations against one backend Session: key scanning, value
inspection and type-specific mutations.
"""

from .inspector import ValueInspector
from .models import KeyInfo, SessionTarget, ValuePreview
from .mutations import MutationService
from .scanner import KeyspaceScanner

__all__ = [
    "KeyInfo",
    "KeyspaceScanner",
    "MutationService",
    "SessionTarget",
    "ValueInspector",
    "ValuePreview",
]
