"""Ways of obtaining API credentials."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Union

from .models import AuthLoginRequest, Credentials


@dataclass(frozen=True)
class PasswordExchange:
    """Exchange an account email and password for an access token."""

    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class StaticToken:
    """Use a pre-issued API token as a bearer credential."""

    token: str = field(repr=False)


Authenticator = Union[PasswordExchange, StaticToken]


def resolve_credentials(
    authenticator: Authenticator,
    login: Callable[[AuthLoginRequest], Credentials],
) -> Credentials:
    """Run the authenticator once and return the resulting credentials.

    ``login`` performs the unauthenticated ``auth/login`` call; it is only
    invoked for ``PasswordExchange``.
    """
    if isinstance(authenticator, PasswordExchange):
        if not authenticator.email or not authenticator.password:
            raise ValueError("email and password are required")
        return login(AuthLoginRequest(email=authenticator.email, password=authenticator.password))
    if isinstance(authenticator, StaticToken):
        if not authenticator.token:
            raise ValueError("token is required")
        return Credentials(access_token=authenticator.token, token_type="Bearer")
    raise TypeError(f"Unsupported authenticator: {type(authenticator).__name__}")
