"""
Role and state checks shared by every authenticated endpoint.

Grades:
- triple: admin, client or master
- double: client or master
- client / master / admin: that single role
"""

import logging
from typing import Optional

from fastapi import HTTPException

from .models import ROLE_ADMIN, ROLE_CLIENT, ROLE_MASTER, Ticket, User

logger = logging.getLogger(__name__)

GRADES = {
    "triple": (ROLE_ADMIN, ROLE_CLIENT, ROLE_MASTER),
    "double": (ROLE_CLIENT, ROLE_MASTER),
    "client": (ROLE_CLIENT,),
    "master": (ROLE_MASTER,),
    "admin": (ROLE_ADMIN,),
}


def check_access(user: Optional[User], grade: str = "triple", active_and_approved: bool = True) -> bool:
    """
    Raises:
        HTTPException 401 without a user, 403 when the user is inactive,
        unapproved or lacks the roles of the grade
    """
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")

    if active_and_approved:
        if not user.active:
            logger.info(f"🔒 Inactive user #{user.id} rejected")
            raise HTTPException(status_code=403, detail=f"User is not active. User #{user.id}")
        if not user.approved:
            logger.info(f"🔒 Unapproved user #{user.id} rejected")
            raise HTTPException(status_code=403, detail=f"User is not approved. User #{user.id}")

    allowed = GRADES.get(grade)
    if allowed is None:
        raise HTTPException(status_code=403, detail="Role not allowed")

    if not any(user.has_role(role) for role in allowed):
        raise HTTPException(status_code=403, detail="Access denied")

    return True


def check_blacklist(
    author: User, assumed_user: Optional[User] = None, ticket: Optional[Ticket] = None
) -> bool:
    """
    Refuse interaction when either side has blacklisted the other, or when the
    author has blacklisted the ticket.
    """
    if ticket is not None:
        check_access(author)
        if author.black_list and author.black_list.blocks_ticket(ticket):
            raise HTTPException(status_code=403, detail="You blacklisted this ticket")

    if assumed_user is not None:
        check_access(assumed_user)
        if author.black_list and author.black_list.blocks_user(assumed_user):
            raise HTTPException(status_code=403, detail="You blacklisted this user")
        if assumed_user.black_list and assumed_user.black_list.blocks_user(author):
            raise HTTPException(status_code=403, detail="You are blacklisted by this user")

    return True
