"""AuthManager - Cached credential and interactive authentication"""

from collections.abc import Callable

from loguru import logger

from deadlock_gc.domain.models import Credential
from deadlock_gc.shared.exceptions import AuthenticationError

from ..protocols import Authenticator, ChallengePresenter, CredentialStore


class AuthManager:
    """Manages the credential used to log on

    Responsibilities:
    - Reading the cached credential on every connection attempt
    - Interactive QR authentication when nothing is cached
    - Persisting the credential once after interactive success
    """

    def __init__(
        self,
        store: CredentialStore,
        authenticator: Authenticator | None,
        presenter: ChallengePresenter,
        on_challenge: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize auth manager

        Args:
            store: Credential store to read from and save to
            authenticator: Starts interactive sessions; None disables them
            presenter: Renders the challenge URL
            on_challenge: Extra callback fired with every challenge URL
        """
        self._store = store
        self._authenticator = authenticator
        self._presenter = presenter
        self._on_challenge = on_challenge
        self._credential: Credential | None = None

    @property
    def credential(self) -> Credential | None:
        """Credential of the current or last logon attempt"""
        return self._credential

    def load_cached(self) -> Credential | None:
        """Read the stored credential

        Returns:
            Credential, or None to fall back to interactive authentication
        """
        self._credential = self._store.load()
        return self._credential

    async def authenticate_interactive(self) -> Credential:
        """Run a QR authentication session until it is approved

        Returns:
            The new credential, already saved to the store

        Raises:
            AuthenticationError: If no authenticator is configured, it fails,
                or the credential cannot be saved
        """
        if self._authenticator is None:
            raise AuthenticationError(
                "No cached credential and no interactive authenticator configured"
            )

        def challenge_changed(challenge_url: str) -> None:
            logger.info("Challenge URL was refreshed")
            self._present(challenge_url)

        try:
            session = await self._authenticator.begin_qr_session(challenge_changed)
            self._present(session.challenge_url)
            credential = await session.wait_for_result()
        except AuthenticationError:
            raise
        except Exception as e:
            raise AuthenticationError(f"Interactive authentication failed: {e}") from e

        try:
            self._store.save(credential)
        except Exception as e:
            raise AuthenticationError(f"Could not save credential: {e}") from e
        self._credential = credential
        logger.info(f"Interactive authentication approved for '{credential.account_name}'")
        return credential

    def _present(self, challenge_url: str) -> None:
        logger.info(f"Challenge URL: {challenge_url}")
        self._presenter(challenge_url)
        if self._on_challenge is not None:
            self._on_challenge(challenge_url)
