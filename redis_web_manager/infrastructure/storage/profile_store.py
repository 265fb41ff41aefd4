"""
Saved Connection Profiles

File-backed store of the named connection profiles an operator has saved.
The connection registry only ever calls `resolve()`; the connection routes
use the full CRUD surface.

File format: a JSON array of profiles, written with orjson and two-space
indentation so the file stays hand-editable.
"""

import shutil
import time
from pathlib import Path

import orjson
from pydantic import BaseModel, ConfigDict, Field

from redis_web_manager.core.config.settings import StorageSettings, get_settings
from redis_web_manager.core.exceptions import ProfileStoreError
from redis_web_manager.core.logging.logger import get_logger

logger = get_logger(__name__)

DEFAULT_FILE_NAME = "connections.json"
DEFAULT_TEMPLATE_NAME = "connections.template.json"


def _now_ms() -> int:
    return int(time.time() * 1000)


class ConnectionProfile(BaseModel):
    """
    A saved connection profile.

    Read-only from the registry's point of view: a profile is resolved once
    per request and never mutated by the core.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str | None = None
    host: str
    port: int
    password: str | None = None
    db: int = 0
    created_at: int = Field(default_factory=_now_ms, alias="createdAt")

    def redacted(self) -> dict:
        """Serialize without the password, for API responses."""
        return self.model_dump(by_alias=True, exclude={"password"})


class ConnectionProfileStore:
    """
    JSON file store for connection profiles.

    Path resolution:
    - CONNECTIONS_FILE, absolute or relative to the working directory
    - a directory path gets connections.json appended
    - default: ./connections.json

    A missing file is seeded from the template only when one of the two
    environment settings was given explicitly; otherwise an empty array is
    written.
    """

    def __init__(
        self,
        connections_file: str | None = None,
        template_file: str | None = None,
        base_dir: Path | None = None,
    ):
        self._base_dir = base_dir or Path.cwd()
        self._allow_template = connections_file is not None or template_file is not None
        self.file_path = self._resolve_connections_path(connections_file)
        self.template_path = self._resolve_template_path(template_file)
        self._init_file()

    @classmethod
    def from_settings(cls, settings: StorageSettings | None = None) -> "ConnectionProfileStore":
        settings = settings or get_settings().storage
        return cls(
            connections_file=settings.CONNECTIONS_FILE,
            template_file=settings.CONNECTIONS_TEMPLATE_FILE,
        )

    def _absolute(self, raw: str) -> Path:
        path = Path(raw)
        return path if path.is_absolute() else self._base_dir / path

    def _resolve_connections_path(self, raw: str | None) -> Path:
        raw = raw.strip() if raw else ""
        path = self._absolute(raw) if raw else self._base_dir / DEFAULT_FILE_NAME
        if path.is_dir():
            return path / DEFAULT_FILE_NAME
        return path

    def _resolve_template_path(self, raw: str | None) -> Path:
        raw = raw.strip() if raw else ""
        return self._absolute(raw or DEFAULT_TEMPLATE_NAME)

    def _init_file(self) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        if self.file_path.exists():
            return

        if self._allow_template and self.template_path.is_file():
            shutil.copyfile(self.template_path, self.file_path)
            logger.info(
                "Connection profiles seeded from template",
                path=str(self.file_path),
                template=str(self.template_path),
            )
            return

        self.file_path.write_bytes(orjson.dumps([], option=orjson.OPT_INDENT_2))
        logger.info("Connection profiles file created", path=str(self.file_path))

    # =========================================================================
    # Read operations
    # =========================================================================

    def all(self) -> list[ConnectionProfile]:
        """
        Load every saved profile.

        An unreadable or malformed file yields an empty list; individual
        malformed entries are skipped.
        """
        try:
            raw = orjson.loads(self.file_path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            logger.error("Failed to read connections file", path=str(self.file_path), error=str(e))
            return []

        if not isinstance(raw, list):
            return []

        profiles = []
        for entry in raw:
            try:
                profiles.append(ConnectionProfile.model_validate(entry))
            except ValueError as e:
                logger.warning("Skipping malformed connection profile", error=str(e))
        return profiles

    def get(self, profile_id: str) -> ConnectionProfile | None:
        return next((p for p in self.all() if p.id == profile_id), None)

    def resolve(self, profile_id: str) -> ConnectionProfile | None:
        """Resolve a connection identifier for the registry."""
        return self.get(profile_id)

    # =========================================================================
    # Write operations
    # =========================================================================

    def add(self, profile: ConnectionProfile) -> None:
        profiles = self.all()
        profiles.append(profile)
        self._save(profiles)

    def update(self, profile: ConnectionProfile) -> bool:
        """Replace the profile with the same id. Returns False if absent."""
        profiles = self.all()
        for index, existing in enumerate(profiles):
            if existing.id == profile.id:
                profiles[index] = profile
                self._save(profiles)
                return True
        return False

    def remove(self, profile_id: str) -> None:
        self._save([p for p in self.all() if p.id != profile_id])

    def _save(self, profiles: list[ConnectionProfile]) -> None:
        payload = [p.model_dump(by_alias=True) for p in profiles]
        try:
            self.file_path.write_bytes(orjson.dumps(payload, option=orjson.OPT_INDENT_2))
        except OSError as e:
            logger.error("Failed to save connections file", path=str(self.file_path), error=str(e))
            raise ProfileStoreError(
                f"Failed to save connections file: {e}",
                details={"path": str(self.file_path)},
            ) from e
