import logging

from werkzeug.security import check_password_hash, generate_password_hash

from dorothy.exceptions import InvalidBodyError, UnauthorizedError
from dorothy.models import User, UserRole
from dorothy.repositories import UserRepository
from dorothy.utils.auth import issue_token

logger = logging.getLogger(__name__)


class AuthService:
    @staticmethod
    def sign_in(email, password):
        """Check credentials and return a token plus the public user fields.

        Unknown email, inactive account and wrong password all fail the same
        way so callers cannot tell which check rejected them.
        """
        user = UserRepository.find_by_email(email)
        if not user:
            logger.warning(f"Login attempt with non-existent email: {email}")
            raise UnauthorizedError("Invalid credentials")

        if not user.active:
            logger.warning(f"Login attempt on inactive account: {email}")
            raise UnauthorizedError("Invalid credentials")

        if not check_password_hash(user.password_hash, password):
            logger.warning(f"Failed login attempt for user: {email}")
            raise UnauthorizedError("Invalid credentials")

        logger.info(f"User logged in successfully: {email}")
        return {"token": issue_token(user), "user": user.to_claims()}

    @staticmethod
    def create_admin(email, password, name):
        if UserRepository.find_by_email(email):
            logger.warning(f"Admin creation attempt with existing email: {email}")
            raise InvalidBodyError("Unable to create admin")

        user = UserRepository.create(
            User(
                email=email.strip().lower(),
                password_hash=generate_password_hash(password),
                name=name,
                role=UserRole.ADMIN.value,
                active=True,
            )
        )
        logger.info(f"Admin user created: {user.email}")
        return {"user": user.to_dict(), "token": issue_token(user)}
