from .profile_store import ConnectionProfile, ConnectionProfileStore

__all__ = ["ConnectionProfile", "ConnectionProfileStore"]
