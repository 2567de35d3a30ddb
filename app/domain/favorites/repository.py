"""Favorite and black list repository - Database operations for per-user lists"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import BlackList, Favorite


class FavoriteRepository:
    """Repository for favorites"""

    @staticmethod
    def get_by_id(db: Session, favorite_id: int) -> Optional[Favorite]:
        return db.get(Favorite, favorite_id)

    @staticmethod
    def get_for_user(db: Session, user_id: int) -> Optional[Favorite]:
        return db.query(Favorite).filter(Favorite.user_id == user_id).first()


class BlackListRepository:
    """Repository for black lists"""

    @staticmethod
    def get_by_id(db: Session, black_list_id: int) -> Optional[BlackList]:
        return db.get(BlackList, black_list_id)

    @staticmethod
    def get_for_user(db: Session, user_id: int) -> Optional[BlackList]:
        return db.query(BlackList).filter(BlackList.author_id == user_id).first()


def save(db: Session, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def delete(db: Session, obj) -> None:
    db.delete(obj)
    db.commit()
