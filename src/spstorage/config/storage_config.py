"""Mount configuration for the SharePoint storage backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from spstorage.errors import ConfigurationError

# Mount parameter names, with the snake_case aliases accepted as well.
_PARAMETER_ALIASES: dict[str, tuple[str, ...]] = {
    "host": ("host",),
    "document_library": ("documentLibrary", "document_library"),
    "user": ("user",),
    "password": ("password",),
}


@dataclass(slots=True, frozen=True)
class StorageConfig:
    """
    Connection settings for one SharePoint document library.

    Validation order matters: an illegal library name is reported before
    missing credentials.
    """

    host: str
    document_library: str
    user: str
    password: str = field(repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.document_library, str) and '"' in self.document_library:
            # Quotes break the filter syntax of remote queries.
            raise ConfigurationError(
                "Illegal character in Document Library Name",
                details={"document_library": self.document_library},
            )

        for key in ("user", "password"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value:
                raise ConfigurationError("No user or password given")

        for key in ("host", "document_library"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(f"StorageConfig.{key} must be a non-empty string")

    @classmethod
    def from_parameters(cls, parameters: Mapping[str, Any]) -> "StorageConfig":
        """Build a config from a mount-parameter mapping."""
        values: dict[str, Any] = {}
        for name, aliases in _PARAMETER_ALIASES.items():
            values[name] = next(
                (parameters[alias] for alias in aliases if parameters.get(alias) is not None),
                None,
            )
        return cls(**values)

    @property
    def credentials(self) -> dict[str, str]:
        """User/password pair handed to the remote client factory."""
        return {"user": self.user, "password": self.password}
