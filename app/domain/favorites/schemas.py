"""Favorite and black list schemas - Pydantic models for validation"""

from typing import Optional, Union

from pydantic import BaseModel

from ...models import BlackList, Favorite
from ...shared.iri import iri

IriOrId = Union[str, int]


class UserListsInput(BaseModel):
    """Omitted lists are left alone; an empty list clears it"""

    clients: Optional[list[IriOrId]] = None
    masters: Optional[list[IriOrId]] = None
    tickets: Optional[list[IriOrId]] = None

    def is_empty(self) -> bool:
        return self.clients is None and self.masters is None and self.tickets is None


class FavoriteResponse(BaseModel):
    id: int
    user: Optional[str]
    tickets: list[str]
    clients: list[str]
    masters: list[str]

    @classmethod
    def from_favorite(cls, favorite: Favorite) -> "FavoriteResponse":
        return cls(
            id=favorite.id,
            user=iri("users", favorite.user_id),
            tickets=[iri("tickets", t.id) for t in favorite.tickets],
            clients=[iri("users", u.id) for u in favorite.clients],
            masters=[iri("users", u.id) for u in favorite.masters],
        )


class BlackListResponse(BaseModel):
    id: int
    author: Optional[str]
    tickets: list[str]
    clients: list[str]
    masters: list[str]
    messages: list[str] = []

    @classmethod
    def from_black_list(cls, black_list: BlackList, messages: Optional[list[str]] = None) -> "BlackListResponse":
        return cls(
            id=black_list.id,
            author=iri("users", black_list.author_id),
            tickets=[iri("tickets", t.id) for t in black_list.tickets],
            clients=[iri("users", u.id) for u in black_list.clients],
            masters=[iri("users", u.id) for u in black_list.masters],
            messages=messages or [],
        )
