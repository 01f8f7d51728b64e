"""Credential domain model"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Credential:
    """Cached identity and long-lived refresh token

    Replaced wholesale after interactive authentication, never mutated.
    """

    account_name: str
    refresh_token: str

    def __repr__(self) -> str:
        return f"Credential(account_name={self.account_name!r}, refresh_token=***)"
