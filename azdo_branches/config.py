"""Configuration handling for azdo-branches"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import platformdirs
import tomli_w

from azdo_branches.constants import (
    APP_NAME,
    DEFAULT_FETCH_WORKERS,
    DEFAULT_REQUEST_TIMEOUT,
    PAT_ENV_VAR,
)
from azdo_branches.exceptions import ConfigError
from azdo_branches.logging_config import get_logger
from azdo_branches.utils.pattern import DEFAULT_PROTECTED_PATTERNS

logger = get_logger(__name__)

CONFIG_FILE_NAME = "config.toml"


def config_path() -> Path:
    """Default location of the config file."""
    return platformdirs.user_config_path(APP_NAME) / CONFIG_FILE_NAME


@dataclass
class Config:
    """Configuration for azdo-branches with validation."""

    # Azure DevOps
    organization_url: str = ""
    pat: Optional[str] = None  # Prefer the environment variable

    # Branch handling
    protected_branches: List[str] = field(default_factory=lambda: list(DEFAULT_PROTECTED_PATTERNS))

    # Network
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    fetch_workers: int = DEFAULT_FETCH_WORKERS

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_organization_url()
        self._validate_protected_branches()
        self._validate_request_timeout()
        self._validate_fetch_workers()

    def _validate_organization_url(self):
        """Strip trailing slashes and require an http(s) URL when set."""
        url = (self.organization_url or "").strip().rstrip("/")
        if url and not url.startswith(("https://", "http://")):
            raise ValueError(f"organization_url must start with https:// or http://, got '{url}'")
        self.organization_url = url

    def _validate_protected_branches(self):
        """Validate protected_branches list."""
        if not isinstance(self.protected_branches, list):
            raise ValueError("protected_branches must be a list")
        if not all(isinstance(pattern, str) for pattern in self.protected_branches):
            raise ValueError("protected_branches must contain only strings")

        patterns = [pattern.strip() for pattern in self.protected_branches if pattern.strip()]
        self.protected_branches = patterns or list(DEFAULT_PROTECTED_PATTERNS)

    def _validate_request_timeout(self):
        """Validate request_timeout is positive."""
        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {self.request_timeout}")

    def _validate_fetch_workers(self):
        """Validate fetch_workers is positive."""
        if self.fetch_workers <= 0:
            raise ValueError(f"fetch_workers must be positive, got {self.fetch_workers}")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "organization_url": self.organization_url,
            "pat": self.pat,
            "protected_branches": self.protected_branches,
            "request_timeout": self.request_timeout,
            "fetch_workers": self.fetch_workers,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        # Extract only known fields
        known_fields = {
            "organization_url",
            "pat",
            "protected_branches",
            "request_timeout",
            "fetch_workers",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)

    @classmethod
    def from_toml(cls, document: Dict[str, Any]) -> "Config":
        """Create Config from the parsed TOML tables."""
        azure = document.get("azure_devops") or {}
        branches = document.get("branches") or {}
        network = document.get("network") or {}

        values: Dict[str, Any] = {}
        if "organization_url" in azure:
            values["organization_url"] = azure["organization_url"]
        if "pat" in azure:
            values["pat"] = azure["pat"]
        if "protected" in branches:
            values["protected_branches"] = branches["protected"]
        if "timeout" in network:
            values["request_timeout"] = network["timeout"]
        if "workers" in network:
            values["fetch_workers"] = network["workers"]
        return cls.from_dict(values)

    def to_toml(self) -> Dict[str, Any]:
        """TOML tables for this config. The PAT is only written if it came from the file."""
        azure: Dict[str, Any] = {"organization_url": self.organization_url}
        if self.pat:
            azure["pat"] = self.pat
        return {
            "azure_devops": azure,
            "branches": {"protected": list(self.protected_branches)},
            "network": {"timeout": self.request_timeout, "workers": self.fetch_workers},
        }

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "Config":
        """
        Load the config file.

        Args:
            path: Config file, defaults to ``config_path()``

        Returns:
            Config

        Raises:
            ConfigError: If the file is missing, unparseable or invalid
        """
        path = Path(path) if path else config_path()
        if not path.exists():
            raise ConfigError(
                f"Config file not found at {path}. Run 'azdo-branches config init' to create one."
            )

        try:
            with open(path, "rb") as f:
                document = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to read config file {path}: {e}") from e

        try:
            config = cls.from_toml(document)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e

        logger.debug(f"Loaded config from {path}")
        return config

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """
        Write the config file, creating its directory.

        Returns:
            Path written

        Raises:
            ConfigError: If the file cannot be written
        """
        path = Path(path) if path else config_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as f:
                tomli_w.dump(self.to_toml(), f)
        except OSError as e:
            raise ConfigError(f"Failed to write config file {path}: {e}") from e

        logger.debug(f"Saved config to {path}")
        return path

    def resolve_pat(self, environ: Optional[Dict[str, str]] = None) -> str:
        """
        Find the personal access token.

        The environment variable wins over the config file.

        Raises:
            ConfigError: If neither provides a PAT
        """
        environ = os.environ if environ is None else environ
        pat = (environ.get(PAT_ENV_VAR) or "").strip()
        if pat:
            return pat
        if self.pat and self.pat.strip():
            return self.pat.strip()
        raise ConfigError(
            f"No Azure DevOps PAT found. Set the {PAT_ENV_VAR} environment variable "
            f"or add 'pat' to the [azure_devops] table of the config file."
        )

    def require_organization_url(self) -> str:
        """
        Raises:
            ConfigError: If no organization URL is configured
        """
        if not self.organization_url:
            raise ConfigError(
                "No Azure DevOps organization URL configured. "
                "Run 'azdo-branches config init' to set one."
            )
        return self.organization_url


def load_protected_patterns(path: Optional[Union[str, Path]] = None) -> List[str]:
    """Protected branch patterns from the config file, or the defaults. Never raises."""
    try:
        return Config.load(path).protected_branches
    except ConfigError as e:
        logger.debug(f"Using default protected branches: {e}")
        return list(DEFAULT_PROTECTED_PATTERNS)
