"""Session credential and the stores that persist it."""

import logging
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class Credential(BaseModel):
    """
    Lighthouse session credential.

    Attributes
    ----------
    session_cookie : str
        Value of the ``lh_session`` cookie

    """

    model_config = ConfigDict(frozen=True)

    session_cookie: str

    def __repr__(self) -> str:
        return "Credential(session_cookie='***')"

    __str__ = __repr__


class SessionStore(Protocol):
    """Capability to load, save, and clear the session credential."""

    def load(self) -> Credential | None:
        """Return the stored credential, or None when there is none."""
        ...

    def save(self, credential: Credential) -> None:
        """Persist ``credential``, replacing any previous one."""
        ...

    def clear(self) -> None:
        """Forget the stored credential; a no-op when nothing is stored."""
        ...


class FileSessionStore:
    """
    Stores the session cookie as plain text in a file.

    Parameters
    ----------
    path : str | Path
        Session file location; ``~`` is expanded

    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> Credential | None:
        """Read the cookie, treating a missing or blank file as no session."""
        try:
            cookie = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None

        if not cookie:
            return None

        return Credential(session_cookie=cookie)

    def save(self, credential: Credential) -> None:
        """Write the cookie, readable by the current user only."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(credential.session_cookie, encoding="utf-8")
        self.path.chmod(0o600)
        logger.debug("Saved session to %s", self.path)

    def clear(self) -> None:
        """Delete the session file if it exists."""
        self.path.unlink(missing_ok=True)
        logger.debug("Cleared session at %s", self.path)


class MemorySessionStore:
    """Keeps the credential in memory for the lifetime of the process."""

    def __init__(self, credential: Credential | None = None) -> None:
        self._credential = credential

    def load(self) -> Credential | None:
        return self._credential

    def save(self, credential: Credential) -> None:
        self._credential = credential

    def clear(self) -> None:
        self._credential = None
