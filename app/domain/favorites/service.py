"""
Favorites and black lists

Both are one-per-user lists of clients, masters and tickets. They differ in
how bad entries are handled:
- favorites reject the whole request with a 404
- black lists skip the entry and report it in `messages`
"""

import logging
from typing import Union

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...access import check_access
from ...models import ROLE_CLIENT, ROLE_MASTER, BlackList, Favorite, Ticket, User
from ...shared.iri import extract_id
from . import repository
from .repository import BlackListRepository, FavoriteRepository
from .schemas import UserListsInput

logger = logging.getLogger(__name__)

MISSING_LISTS = "At least one field (clients, masters, or tickets) must be provided"


def _unique(values: list) -> list:
    return list(dict.fromkeys(values))


class _ListResolver:
    """
    Turns IRIs into users and tickets. With `strict` an unknown entry raises
    404; otherwise it is skipped and described in `messages`.
    """

    def __init__(self, db: Session, owner: User, strict: bool):
        self.db = db
        self.owner = owner
        self.strict = strict
        self.messages: list[str] = []

    def _reject(self, status_code: int, detail: str) -> None:
        if self.strict:
            raise HTTPException(status_code=status_code, detail=detail)
        self.messages.append(detail)

    def users(self, values: list[Union[str, int]], role: str, label: str) -> list[User]:
        found = []
        for value in _unique(values):
            user_id = extract_id(value, "users")
            user = self.db.get(User, user_id) if user_id is not None else None
            if user is None or not user.has_role(role):
                self._reject(404, f"{label} #{value} not found")
                continue
            if not self.strict and user.id == self.owner.id:
                self._reject(400, "Cannot add yourself to blacklist")
                continue
            if user not in found:
                found.append(user)
        return found

    def tickets(self, values: list[Union[str, int]]) -> list[Ticket]:
        found = []
        for value in _unique(values):
            ticket_id = extract_id(value, "tickets")
            ticket = self.db.get(Ticket, ticket_id) if ticket_id is not None else None
            if ticket is None:
                self._reject(404, f"Ticket #{value} not found")
                continue
            if ticket not in found:
                found.append(ticket)
        return found

    def apply(self, target: Union[Favorite, BlackList], data: UserListsInput) -> None:
        """Replace only the lists present in the request"""
        if data.masters is not None:
            target.masters = self.users(data.masters, ROLE_MASTER, "Master")
        if data.clients is not None:
            target.clients = self.users(data.clients, ROLE_CLIENT, "Client")
        if data.tickets is not None:
            target.tickets = self.tickets(data.tickets)


class FavoriteService:
    """Service layer for favorites"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = FavoriteRepository()

    def _get_owned(self, favorite_id: int, user: User) -> Favorite:
        favorite = self.repo.get_by_id(self.db, favorite_id)
        if not favorite:
            raise HTTPException(status_code=404, detail="Resource not found")
        if favorite.user_id != user.id:
            raise HTTPException(status_code=400, detail="Ownership doesn't match")
        return favorite

    def get_my_favorite(self, user: User) -> Favorite:
        check_access(user)
        favorite = self.repo.get_for_user(self.db, user.id)
        if not favorite:
            raise HTTPException(status_code=404, detail="Resource not found")
        return favorite

    def create_favorite(self, data: UserListsInput, user: User) -> Favorite:
        check_access(user)

        if self.repo.get_for_user(self.db, user.id):
            raise HTTPException(status_code=400, detail="This user has favorites, patch instead")
        if data.is_empty():
            raise HTTPException(status_code=400, detail=MISSING_LISTS)

        favorite = Favorite(user_id=user.id)
        _ListResolver(self.db, user, strict=True).apply(favorite, data)
        favorite = repository.save(self.db, favorite)
        logger.info(f"💛 Favorites #{favorite.id} created for user #{user.id}")
        return favorite

    def update_favorite(self, favorite_id: int, data: UserListsInput, user: User) -> Favorite:
        check_access(user)
        favorite = self._get_owned(favorite_id, user)

        if data.is_empty():
            raise HTTPException(status_code=400, detail=MISSING_LISTS)

        _ListResolver(self.db, user, strict=True).apply(favorite, data)
        return repository.save(self.db, favorite)

    def delete_favorite(self, favorite_id: int, user: User) -> None:
        check_access(user)
        repository.delete(self.db, self._get_owned(favorite_id, user))


class BlackListService:
    """Service layer for black lists"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BlackListRepository()

    def _get_owned(self, black_list_id: int, user: User) -> BlackList:
        black_list = self.repo.get_by_id(self.db, black_list_id)
        if not black_list:
            raise HTTPException(status_code=404, detail="Resource not found")
        if black_list.author_id != user.id:
            raise HTTPException(status_code=400, detail="Ownership doesn't match")
        return black_list

    def get_my_black_list(self, user: User) -> BlackList:
        check_access(user)
        black_list = self.repo.get_for_user(self.db, user.id)
        if not black_list:
            raise HTTPException(status_code=404, detail="Resource not found")
        return black_list

    def create_black_list(self, data: UserListsInput, user: User) -> tuple[BlackList, list[str]]:
        """
        Returns:
            (black list, messages about skipped entries)
        """
        check_access(user)

        if self.repo.get_for_user(self.db, user.id):
            raise HTTPException(status_code=400, detail="This user has blacklist, patch instead")
        if data.is_empty():
            raise HTTPException(status_code=400, detail=MISSING_LISTS)

        resolver = _ListResolver(self.db, user, strict=False)
        black_list = BlackList(author=user)
        resolver.apply(black_list, data)
        black_list = repository.save(self.db, black_list)

        if resolver.messages:
            logger.info(f"🚫 Black list #{black_list.id} skipped entries: {resolver.messages}")
        return black_list, resolver.messages

    def update_black_list(
        self, black_list_id: int, data: UserListsInput, user: User
    ) -> tuple[BlackList, list[str]]:
        check_access(user)
        black_list = self._get_owned(black_list_id, user)

        if data.is_empty():
            raise HTTPException(status_code=400, detail=MISSING_LISTS)

        resolver = _ListResolver(self.db, user, strict=False)
        resolver.apply(black_list, data)
        return repository.save(self.db, black_list), resolver.messages

    def delete_black_list(self, black_list_id: int, user: User) -> None:
        check_access(user)
        repository.delete(self.db, self._get_owned(black_list_id, user))
