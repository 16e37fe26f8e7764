from sqlalchemy.orm import Session

import marketplace.repositories.user as user_repo
from marketplace.db.models.user import User as UserModel
from marketplace.errors import DuplicateResourceError, NotFoundError


def create_user(db: Session, email: str, name: str) -> UserModel:
    """
    Create a new user.

    Raises:
        DuplicateResourceError: If the email is already registered.
    """
    if user_repo.get_user_by_email(db, email):
        raise DuplicateResourceError("Email already registered")
    return user_repo.create_user(db, email=email, name=name)


def get_user(db: Session, user_id: int) -> UserModel:
    user = user_repo.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User", user_id)
    return user
