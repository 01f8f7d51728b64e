"""Credential stores"""

from pathlib import Path

from loguru import logger

from deadlock_gc.domain.models import Credential


class MemoryCredentialStore:
    """Keeps the credential in process memory only"""

    def __init__(self, credential: Credential | None = None) -> None:
        self._credential = credential

    def load(self) -> Credential | None:
        return self._credential

    def save(self, credential: Credential) -> None:
        self._credential = credential


class FileCredentialStore:
    """Stores the account name and refresh token as two plain files

    Layout in the configured directory:
    - .username: account name
    - .token: refresh token
    """

    USERNAME_FILE = ".username"
    TOKEN_FILE = ".token"

    def __init__(self, directory: str | Path = ".") -> None:
        self._directory = Path(directory)

    @property
    def username_path(self) -> Path:
        return self._directory / self.USERNAME_FILE

    @property
    def token_path(self) -> Path:
        return self._directory / self.TOKEN_FILE

    def load(self) -> Credential | None:
        """Read the cached credential

        Returns:
            Credential, or None when either file is missing or empty
        """
        if not self.username_path.exists() or not self.token_path.exists():
            logger.debug(f"No cached credential in {self._directory}")
            return None

        account_name = self.username_path.read_text().strip()
        refresh_token = self.token_path.read_text().strip()
        if not account_name or not refresh_token:
            logger.debug(f"Cached credential in {self._directory} is empty")
            return None

        return Credential(account_name=account_name, refresh_token=refresh_token)

    def save(self, credential: Credential) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        self.username_path.write_text(credential.account_name)
        self.token_path.write_text(credential.refresh_token)
        logger.info(
            f"Saved credential for '{credential.account_name}' to {self._directory}"
        )
