"""AWS credential resolution for enterprise providers."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AwsCredentials:
    """A time-boxed access key / secret / session token triple."""

    access_key: str
    secret_key: str = field(repr=False)
    session_token: str | None = field(default=None, repr=False)


class CredentialResolver(Protocol):
    """Resolves a named profile into credentials."""

    def resolve(self, profile: str) -> AwsCredentials: ...


class ProfileCredentialResolver:
    """Reads credentials from the shared AWS config/credentials files.

    Every call builds a fresh session, so rotated credentials are picked up
    on the next client construction.
    """

    def resolve(self, profile: str) -> AwsCredentials:
        """Resolve ``profile``.

        Raises:
            ConfigurationError: If the profile does not exist, its role
                cannot be assumed, or it yields no credentials.
        """
        try:
            session = boto3.Session(profile_name=profile)
            credentials = session.get_credentials()
            frozen = credentials.get_frozen_credentials() if credentials is not None else None
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to resolve AWS profile '{profile}': {e}")
            raise ConfigurationError(
                f"Could not load AWS credentials for profile '{profile}': {e}",
                setting="aws_profile",
            ) from e

        if frozen is None or not frozen.access_key or not frozen.secret_key:
            raise ConfigurationError(
                f"AWS profile '{profile}' has no usable credentials",
                setting="aws_profile",
            )

        return AwsCredentials(
            access_key=frozen.access_key,
            secret_key=frozen.secret_key,
            session_token=frozen.token,
        )
