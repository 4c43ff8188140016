"""
Fintecture Configuration
========================
Application credentials and key material for signing and verification.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Union

import structlog

from .exceptions import ConfigError

logger = structlog.get_logger(__name__)

SANDBOX_ENVIRONMENT = "sandbox"
PRODUCTION_ENVIRONMENT = "production"
ENVIRONMENTS = (SANDBOX_ENVIRONMENT, PRODUCTION_ENVIRONMENT)

DEFAULT_WEBHOOK_REQUEST_TARGET = "post /webhook"


@dataclass
class FintectureConfig:
    """Configuration for an application talking to the Fintecture API."""
    app_id: str = ""
    app_secret: str = ""
    private_key: Optional[Union[str, bytes]] = field(default=None, repr=False)
    env: str = SANDBOX_ENVIRONMENT
    # Method and path the webhook endpoint is registered under
    webhook_request_target: str = DEFAULT_WEBHOOK_REQUEST_TARGET

    @classmethod
    def from_env(cls) -> "FintectureConfig":
        """
        Build a configuration from environment variables.

        FINTECTURE_PRIVATE_KEY holds the PEM itself; when it is empty,
        FINTECTURE_PRIVATE_KEY_PATH names a file to read it from.

        Raises:
            ConfigError: If the key file cannot be read
        """
        private_key = os.environ.get("FINTECTURE_PRIVATE_KEY") or None
        key_path = os.environ.get("FINTECTURE_PRIVATE_KEY_PATH")
        if private_key is None and key_path:
            try:
                with open(key_path, "r") as fh:
                    private_key = fh.read()
            except OSError as e:
                raise ConfigError(
                    f"Unable to read private key file: {key_path}",
                    details=str(e),
                ) from e

        return cls(
            app_id=os.environ.get("FINTECTURE_APP_ID", ""),
            app_secret=os.environ.get("FINTECTURE_APP_SECRET", ""),
            private_key=private_key,
            env=os.environ.get("FINTECTURE_ENV", SANDBOX_ENVIRONMENT),
            webhook_request_target=os.environ.get(
                "FINTECTURE_WEBHOOK_TARGET", DEFAULT_WEBHOOK_REQUEST_TARGET
            ),
        )

    @property
    def is_production(self) -> bool:
        return self.env == PRODUCTION_ENVIRONMENT

    def validate_config_integrity(self) -> "FintectureConfig":
        """
        Check that the configuration can be used for signing.

        Returns:
            The configuration itself, for chaining

        Raises:
            ConfigError: If private_key is missing or env is unknown
        """
        if not self.private_key:
            raise ConfigError("private_key must be set to use this function")
        if self.env not in ENVIRONMENTS:
            raise ConfigError(
                f"env must be one of {', '.join(ENVIRONMENTS)}",
                details={"env": self.env},
            )
        logger.debug("config_validated", app_id=self.app_id, env=self.env)
        return self
