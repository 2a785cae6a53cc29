import inspect
from typing import Callable, Optional

from shared.models.auth import AuthState, AuthUser
from shared.utils.logging_config import get_logger
from invoice_tracker_api.application.interfaces.service_interfaces import (
    AuthProviderInterface,
    AuthStateCallback,
)

logger = get_logger(__name__)


class InMemoryAuthProvider(AuthProviderInterface):
    """
    Holds the signed-in user for a single session and notifies subscribers.

    The real identity provider is external; the API layer pushes the caller
    identity in through ``sign_in``/``sign_out``.
    """

    def __init__(self):
        self._state = AuthState(user=None, is_loading=False)
        self._subscribers: list[AuthStateCallback] = []

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def user(self) -> Optional[AuthUser]:
        return self._state.user

    def on_auth_state_changed(self, callback: AuthStateCallback) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def sign_in(self, user: AuthUser) -> None:
        if self._state.user == user and not self._state.is_loading:
            return
        logger.info("User signed in", extra={"user_id": user.id})
        await self._publish(AuthState(user=user, is_loading=False))

    async def sign_out(self) -> None:
        if self._state.user is None:
            return
        logger.info("User signed out", extra={"user_id": self._state.user.id})
        await self._publish(AuthState(user=None, is_loading=False))

    async def set_loading(self, is_loading: bool) -> None:
        await self._publish(AuthState(user=self._state.user, is_loading=is_loading))

    async def _publish(self, state: AuthState) -> None:
        self._state = state
        for callback in list(self._subscribers):
            result = callback(state)
            if inspect.isawaitable(result):
                await result
