"""Login for the SQLAdmin console.

The console is for academy staff doing data fixes, so it uses one shared
operator account from settings rather than Firebase roles.
"""

import hmac
import logging

from sqladmin.authentication import AuthenticationBackend
from starlette.requests import Request

from academy.core.settings import get_settings

logger = logging.getLogger(__name__)

SESSION_KEY = "admin_user"


def _matches(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode(), expected.encode())


class AdminAuth(AuthenticationBackend):
    def __init__(self) -> None:
        # SQLAdmin installs SessionMiddleware with this secret.
        super().__init__(secret_key=get_settings().session_secret_key)

    async def login(self, request: Request) -> bool:
        form = await request.form()
        # SQLAdmin's login template posts "username"; some versions use "email".
        username = str(form.get("username", form.get("email", ""))).strip()
        password = str(form.get("password", ""))

        settings = get_settings()
        # Evaluate both so timing does not reveal which one was wrong.
        ok = _matches(username, settings.admin_username) & _matches(
            password, settings.admin_password
        )
        if not ok:
            logger.warning("Admin console login failed for %r", username)
            return False

        request.session[SESSION_KEY] = username
        logger.info("Admin console login for %r", username)
        return True

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        return bool(request.session.get(SESSION_KEY))
