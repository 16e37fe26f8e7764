from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from marketplace.api.deps import get_db
from marketplace.schemas.user import User, UserCreate
from marketplace.services.user import create_user, get_user

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
def create_new_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """
    Register a user that can own, rent, pay for and review products.
    """
    user = create_user(db, email=user_data.email, name=user_data.name)
    return User.model_validate(user)


@router.get("/{user_id}", response_model=User)
def get_user_by_id(user_id: int, db: Session = Depends(get_db)):
    user = get_user(db, user_id)
    return User.model_validate(user)
