"""
================================================================================
Account Credentials
================================================================================

Account data generated by the registration journey and handed over to the
journeys that sign in afterwards.

The hand-off is an explicit, write-once CredentialStore owned by the test
session instead of process-wide mutable globals. Consumers that run before a
producer (or without one) fail loudly, unless credentials were pre-seeded
through configuration (``account.email`` / ``account.password``).

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from loguru import logger

from .config_loader import ConfigLoader
from .errors import ConfigurationMissingError


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(email={self.email!r}, password='***')"


@dataclass(frozen=True)
class AccountDetails:
    """
    Registration form data.

    Attributes:
        first_name: Given name
        middle_name: Middle name / initial (may be empty)
        last_name: Family name
        email: Unique login email
        password: Password (also typed into the confirmation field)
    """
    first_name: str
    middle_name: str
    last_name: str
    email: str
    password: str

    @property
    def full_name(self) -> str:
        """Name as the storefront prints it in the welcome message."""
        return " ".join(p for p in (self.first_name, self.middle_name, self.last_name) if p)

    @property
    def credentials(self) -> Credentials:
        return Credentials(self.email, self.password)

    def __repr__(self) -> str:
        return (
            f"AccountDetails(first_name={self.first_name!r}, middle_name={self.middle_name!r}, "
            f"last_name={self.last_name!r}, email={self.email!r}, password='***')"
        )


def generate_unique_email(prefix: str = "testuser", domain: str = "gmail.com") -> str:
    """Timestamp-based address so repeated registrations never collide."""
    return f"{prefix}_{int(time.time() * 1000)}{uuid.uuid4().hex[:4]}@{domain}"


def new_account(
    first_name: str = "Test",
    middle_name: str = "QA",
    last_name: str = "User",
    password: str = "Password123!",
    email: Optional[str] = None,
) -> AccountDetails:
    """Build AccountDetails with a freshly generated email."""
    return AccountDetails(
        first_name=first_name,
        middle_name=middle_name,
        last_name=last_name,
        email=email or generate_unique_email(),
        password=password,
    )


class CredentialStore:
    """
    Write-once holder for the credentials of the account created in this session.

    Usage:
        >>> store = CredentialStore()
        >>> store.publish(account.credentials)
        >>> store.get().email
    """

    def __init__(self, credentials: Optional[Credentials] = None):
        self._credentials = credentials

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "CredentialStore":
        """Create a store, pre-seeded when ``account.email`` and ``account.password`` are set."""
        config = config or ConfigLoader()
        email = config.get("account.email")
        password = config.get("account.password")
        if email and password:
            logger.info(f"Using pre-configured account: {email}")
            return cls(Credentials(str(email), str(password)))
        return cls()

    @property
    def is_published(self) -> bool:
        return self._credentials is not None

    def publish(self, credentials: Credentials) -> None:
        """
        Record the created account's credentials.

        Raises:
            ValueError: If credentials were already published or are blank
        """
        if not credentials.email or not credentials.password:
            raise ValueError("Cannot publish blank credentials")
        if self._credentials is not None:
            raise ValueError(
                f"Credentials already published for {self._credentials.email}"
            )
        self._credentials = credentials
        logger.info(f"Published credentials for: {credentials.email}")

    def get(self) -> Credentials:
        """
        Return the published credentials.

        Raises:
            ConfigurationMissingError: If nothing has been published yet
        """
        if self._credentials is None:
            raise ConfigurationMissingError(
                "No account credentials available: run the account creation journey "
                "first or set account.email / account.password"
            )
        return self._credentials

    async def get_or_register(
        self,
        register: Callable[[AccountDetails], Awaitable[None]],
    ) -> Credentials:
        """
        Return the published credentials, registering a fresh account first if there are none.

        Each pytest-xdist worker holds its own store, so a worker that never
        ran the account creation journey creates its own customer here.

        Args:
            register: Coroutine function that creates ``account`` in the storefront
        """
        if self._credentials is None:
            account = new_account()
            logger.info(f"No published account; registering {account.email}")
            await register(account)
            self.publish(account.credentials)
        return self._credentials


__all__ = [
    "AccountDetails",
    "Credentials",
    "CredentialStore",
    "generate_unique_email",
    "new_account",
]
