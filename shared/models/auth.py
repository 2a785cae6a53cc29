from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthUser:
    """Identity handed over by the authentication provider."""
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None


@dataclass(frozen=True)
class AuthState:
    user: Optional[AuthUser] = None
    is_loading: bool = False
