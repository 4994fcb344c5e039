"""Registration service - account creation with first-user bootstrap."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.movieclub.core.exceptions import ConflictError
from src.movieclub.core.logging import get_logger
from src.movieclub.core.security import hash_password
from src.movieclub.models import User, UserRole, UserStatus
from src.movieclub.repositories import UserRepository

logger = get_logger(__name__)

EMAIL_TAKEN = "Email already registered"
USERNAME_TAKEN = "Username already taken"


class RegistrationService:
    """Creates accounts. The very first account becomes an active admin."""

    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def register(self, username: str, email: str, password: str) -> User:
        """Create a user.

        Every account after the first starts as role=user, status=pending and
        must be approved by an admin before it can sign in.

        Raises ConflictError if the email or username is already in use.
        """
        email = email.lower().strip()

        if await self.user_repo.exists_by_email(email):
            raise ConflictError(EMAIL_TAKEN)
        if await self.user_repo.exists_by_username(username):
            raise ConflictError(USERNAME_TAKEN)

        hashed = hash_password(password)

        try:
            await self.user_repo.lock_for_bootstrap()
            is_first_user = await self.user_repo.count() == 0

            user = User(
                username=username,
                email=email,
                hashed_password=hashed,
                role=(UserRole.ADMIN if is_first_user else UserRole.USER).value,
                status=(UserStatus.ACTIVE if is_first_user else UserStatus.PENDING).value,
            )
            self.user_repo.add(user)
            await self.session.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent registration
            await self.session.rollback()
            if "username" in str(e.orig).lower():
                raise ConflictError(USERNAME_TAKEN) from e
            raise ConflictError(EMAIL_TAKEN) from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "User registered",
            user_id=str(user.id),
            role=user.role,
            status=user.status,
        )
        return user
