"""
Redis Web Manager

Backend for a browser-based Redis manager: a connection registry that
multiplexes saved connections onto live sessions, a capped keyspace
scanner, a type-aware value inspector and a mutation layer.
"""

__version__ = "1.0.0"
