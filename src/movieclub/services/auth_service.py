"""Authentication service - credential checks and token issuance."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.movieclub.core.exceptions import AccountNotActiveError
from src.movieclub.core.logging import get_logger
from src.movieclub.core.security import (
    create_access_token,
    dummy_password_hash,
    hash_password,
    password_needs_rehash,
    verify_password,
)
from src.movieclub.models import User, UserStatus
from src.movieclub.repositories import UserRepository
from src.movieclub.schemas.auth import LoginResponse
from src.movieclub.schemas.user import UserRead

logger = get_logger(__name__)


class AuthService:
    """Authenticates users by email and password."""

    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def authenticate(self, email: str, password: str) -> LoginResponse | None:
        """Authenticate user and return an access token.

        Returns None for an unknown email or a wrong password.
        Raises AccountNotActiveError when the password is right but the
        account is pending approval or inactive; no token is issued then.
        """
        user = await self.user_repo.get_by_email(email.lower().strip())

        # Always verify a hash so response time does not reveal whether
        # the email is registered
        password_hash = user.hashed_password if user else dummy_password_hash()
        password_valid = verify_password(password, password_hash)

        if user is None or not password_valid:
            return None

        if user.status == UserStatus.PENDING.value:
            logger.info("Login refused for pending account", user_id=str(user.id))
            raise AccountNotActiveError(
                "Account pending administrator approval", code="account_pending"
            )
        if user.status != UserStatus.ACTIVE.value:
            logger.info("Login refused for inactive account", user_id=str(user.id))
            raise AccountNotActiveError("Account is inactive", code="account_inactive")

        if password_needs_rehash(user.hashed_password):
            await self._upgrade_hash(user, password)

        logger.info("User logged in", user_id=str(user.id))
        return LoginResponse(
            token=create_access_token(user.id),
            user=UserRead.model_validate(user),
        )

    async def _upgrade_hash(self, user: User, password: str) -> None:
        """Re-hash with the current Argon2 parameters after a successful login."""
        user.hashed_password = hash_password(password)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Password hash upgraded", user_id=str(user.id))
