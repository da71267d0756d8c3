"""
Session provider interface for the Contacts Dashboard.

The dashboard never reads auth state from a module global; pages are
handed a SessionProvider and ask it for the current user.
"""

from dataclasses import dataclass
from typing import Optional

from typing_extensions import Protocol


@dataclass(frozen=True)
class User:
    """The signed-in user as far as the dashboard cares."""
    id: str
    name: str
    email: str

    @property
    def initials(self) -> str:
        parts = [p for p in self.name.split() if p]
        return ''.join(p[0] for p in parts[:2]).upper()


class SessionProvider(Protocol):
    """Anything that can report the current user."""

    def current_user(self) -> Optional[User]:
        ...


class StaticSessionProvider:
    """Demo provider: a fixed user (or nobody), switchable by sign_in/sign_out."""

    def __init__(self, user: Optional[User] = None):
        self._user = user

    def current_user(self) -> Optional[User]:
        return self._user

    def sign_in(self, user: User) -> None:
        self._user = user

    def sign_out(self) -> None:
        self._user = None


def is_authenticated(provider: SessionProvider) -> bool:
    return provider.current_user() is not None
