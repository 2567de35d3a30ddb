"""User repository - Database operations for users"""

from typing import Optional

from sqlalchemy import String, cast
from sqlalchemy.orm import Session

from ...models import User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.get(User, user_id)

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.strip().lower()).first()

    @staticmethod
    def get_users_by_role(db: Session, role: str, only_active: bool = True) -> list[User]:
        """Users whose roles contain `role`; roles are a JSON list, matched as text"""
        query = db.query(User).filter(cast(User.roles, String).like(f"%{role}%"))
        if only_active:
            query = query.filter(User.active.is_(True), User.approved.is_(True))
        return query.order_by(User.id).all()

    @staticmethod
    def get_user_by_role(db: Session, role: str, user_id: int) -> Optional[User]:
        return (
            db.query(User)
            .filter(User.id == user_id, cast(User.roles, String).like(f"%{role}%"))
            .first()
        )

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        """Update a user with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(user, key):
                setattr(user, key, value)

        db.commit()
        db.refresh(user)
        return user
