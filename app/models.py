from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import relationship

from .database import Base

ROLE_ADMIN = "ROLE_ADMIN"
ROLE_CLIENT = "ROLE_CLIENT"
ROLE_MASTER = "ROLE_MASTER"
ROLE_USER = "ROLE_USER"


def utcnow() -> datetime:
    """Naive UTC timestamp, the format stored in every DateTime column"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Many-to-many link tables for favorites and blacklists
favorite_tickets = Table(
    "favorite_tickets",
    Base.metadata,
    Column("favorite_id", Integer, ForeignKey("favorites.id", ondelete="CASCADE"), primary_key=True),
    Column("ticket_id", Integer, ForeignKey("tickets.id", ondelete="CASCADE"), primary_key=True),
)

favorite_clients = Table(
    "favorite_clients",
    Base.metadata,
    Column("favorite_id", Integer, ForeignKey("favorites.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

favorite_masters = Table(
    "favorite_masters",
    Base.metadata,
    Column("favorite_id", Integer, ForeignKey("favorites.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

black_list_tickets = Table(
    "black_list_tickets",
    Base.metadata,
    Column("black_list_id", Integer, ForeignKey("black_lists.id", ondelete="CASCADE"), primary_key=True),
    Column("ticket_id", Integer, ForeignKey("tickets.id", ondelete="CASCADE"), primary_key=True),
)

black_list_clients = Table(
    "black_list_clients",
    Base.metadata,
    Column("black_list_id", Integer, ForeignKey("black_lists.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

black_list_masters = Table(
    "black_list_masters",
    Base.metadata,
    Column("black_list_id", Integer, ForeignKey("black_lists.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    GENDERS = ("gender_female", "gender_male", "gender_neutral")

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(180), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=True)  # Always stored hashed, see listeners
    name = Column(String(32), nullable=True)
    surname = Column(String(32), nullable=True)
    patronymic = Column(String(32), nullable=True)
    bio = Column(Text, nullable=True)
    gender = Column(String(16), nullable=True)
    phone1 = Column(String(15), nullable=True)
    phone2 = Column(String(15), nullable=True)
    remotely = Column(Boolean, nullable=True)  # Master works remotely
    image = Column(String(255), nullable=True)
    rating = Column(Float, nullable=True)  # Derived from reviews, see listeners
    roles = Column(JSON, default=list, nullable=False)
    active = Column(Boolean, default=False, nullable=False)
    approved = Column(Boolean, default=False, nullable=False)
    is_online = Column(Boolean, default=False, nullable=False)
    last_seen = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    favorite = relationship("Favorite", back_populates="user", uselist=False)
    black_list = relationship("BlackList", back_populates="author", uselist=False)
    confirmation_tokens = relationship(
        "AccountConfirmationToken", back_populates="user", cascade="all, delete-orphan"
    )

    def has_role(self, role: str) -> bool:
        return role in (self.roles or [])

    def get_roles(self) -> list[str]:
        """Stored roles plus the implicit ROLE_USER every account has"""
        roles = list(self.roles or [])
        if ROLE_USER not in roles:
            roles.append(ROLE_USER)
        return roles


class AccountConfirmationToken(Base):
    __tablename__ = "account_confirmation_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token = Column(String(64), unique=True, index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="confirmation_tokens")


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(64), nullable=True)
    description = Column(Text, nullable=True)
    image = Column(String(255), nullable=True)

    tickets = relationship("Ticket", back_populates="category")


class Unit(Base):
    __tablename__ = "units"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)

    tickets = relationship("Ticket", back_populates="unit")


class Ticket(Base):
    """A client's request (service=False) or a master's service offer (service=True)"""

    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(64), nullable=True)
    description = Column(Text, nullable=True)
    notice = Column(Text, nullable=True)
    budget = Column(Float, nullable=True)
    negotiable_budget = Column(Boolean, nullable=True)
    service = Column(Boolean, nullable=True)
    active = Column(Boolean, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    unit_id = Column(Integer, ForeignKey("units.id"), nullable=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    master_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    category = relationship("Category", back_populates="tickets")
    unit = relationship("Unit", back_populates="tickets")
    author = relationship("User", foreign_keys=[author_id])
    master = relationship("User", foreign_keys=[master_id])


class Chat(Base):
    __tablename__ = "chats"

    id = Column(Integer, primary_key=True, index=True)
    active = Column(Boolean, nullable=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    reply_author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    author = relationship("User", foreign_keys=[author_id])
    reply_author = relationship("User", foreign_keys=[reply_author_id])
    ticket = relationship("Ticket")
    messages = relationship(
        "ChatMessage",
        back_populates="chat",
        cascade="all, delete-orphan",
        order_by="ChatMessage.id",
    )

    def has_participant(self, user) -> bool:
        return user is not None and user.id in (self.author_id, self.reply_author_id)


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, index=True)
    text = Column(Text, nullable=True)
    chat_id = Column(Integer, ForeignKey("chats.id", ondelete="CASCADE"), nullable=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reply_to_id = Column(Integer, ForeignKey("chat_messages.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    chat = relationship("Chat", back_populates="messages")
    author = relationship("User")
    reply_to = relationship("ChatMessage", remote_side=[id])
    images = relationship(
        "ChatImage", back_populates="chat_message", cascade="all, delete-orphan", order_by="ChatImage.id"
    )


class ChatImage(Base):
    __tablename__ = "chat_images"

    id = Column(Integer, primary_key=True, index=True)
    image = Column(String(255), nullable=False)  # Stored file name
    chat_message_id = Column(Integer, ForeignKey("chat_messages.id", ondelete="CASCADE"), nullable=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    chat_message = relationship("ChatMessage", back_populates="images")


class Review(Base):
    """type=client: a master reviews a client; type=master: a client reviews a master"""

    __tablename__ = "reviews"

    TYPES = ("client", "master")

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(16), nullable=True)
    rating = Column(Float, nullable=True)
    description = Column(Text, nullable=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="SET NULL"), nullable=True)
    master_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    client_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    ticket = relationship("Ticket")
    master = relationship("User", foreign_keys=[master_id])
    client = relationship("User", foreign_keys=[client_id])

    @property
    def target_user_id(self):
        """The user whose rating this review affects"""
        return self.client_id if self.type == "client" else self.master_id

    @property
    def writer_id(self):
        return self.master_id if self.type == "client" else self.client_id


class TechSupport(Base):
    __tablename__ = "tech_supports"

    SUPPORT = ("account", "ticket", "platform", "issues", "law", "feedback", "urgent", "other")
    STATUSES = ("new", "renewed", "in_progress", "resolved", "closed")
    ACTIVE_STATUSES = ("new", "renewed", "in_progress")
    PRIORITIES = ("low", "normal", "high", "urgent")

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=True)
    reason = Column(String(255), nullable=True)
    status = Column(String(255), nullable=True)
    priority = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    administrant_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    author = relationship("User", foreign_keys=[author_id])
    administrant = relationship("User", foreign_keys=[administrant_id])
    messages = relationship(
        "TechSupportMessage",
        back_populates="tech_support",
        cascade="all, delete-orphan",
        order_by="TechSupportMessage.id",
    )


class TechSupportMessage(Base):
    __tablename__ = "tech_support_messages"

    id = Column(Integer, primary_key=True, index=True)
    text = Column(Text, nullable=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    tech_support_id = Column(Integer, ForeignKey("tech_supports.id", ondelete="CASCADE"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    author = relationship("User")
    tech_support = relationship("TechSupport", back_populates="messages")


class Appeal(Base):
    """Complaint about a ticket or a chat; the details live on the typed child row"""

    __tablename__ = "appeals"

    TYPES = ("ticket", "chat")

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    appeal_ticket = relationship(
        "AppealTicket", back_populates="appeal", uselist=False, cascade="all, delete-orphan"
    )
    appeal_chat = relationship(
        "AppealChat", back_populates="appeal", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def details(self):
        return self.appeal_ticket if self.type == "ticket" else self.appeal_chat


class AppealTicket(Base):
    __tablename__ = "appeal_tickets"

    COMPLAINTS = (
        "lateness",
        "bad_quality",
        "property_damage",
        "overpricing",
        "unprofessionalism",
        "fraud",
        "racism_nazism_xenophobia",
        "other",
    )

    id = Column(Integer, primary_key=True, index=True)
    appeal_id = Column(Integer, ForeignKey("appeals.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    complaint_reason = Column(String(255), nullable=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    respondent_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="SET NULL"), nullable=True)

    appeal = relationship("Appeal", back_populates="appeal_ticket")
    author = relationship("User", foreign_keys=[author_id])
    respondent = relationship("User", foreign_keys=[respondent_id])
    ticket = relationship("Ticket")


class AppealChat(Base):
    __tablename__ = "appeal_chats"

    COMPLAINTS = ("offend", "rude_language", "fraud", "racism_nazism_xenophobia", "other")

    id = Column(Integer, primary_key=True, index=True)
    appeal_id = Column(Integer, ForeignKey("appeals.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    complaint_reason = Column(String(255), nullable=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    respondent_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    chat_id = Column(Integer, ForeignKey("chats.id", ondelete="SET NULL"), nullable=True)

    appeal = relationship("Appeal", back_populates="appeal_chat")
    author = relationship("User", foreign_keys=[author_id])
    respondent = relationship("User", foreign_keys=[respondent_id])
    chat = relationship("Chat")


class Favorite(Base):
    __tablename__ = "favorites"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    user = relationship("User", back_populates="favorite")
    tickets = relationship("Ticket", secondary=favorite_tickets, order_by="Ticket.id")
    clients = relationship("User", secondary=favorite_clients, order_by="User.id")
    masters = relationship("User", secondary=favorite_masters, order_by="User.id")


class BlackList(Base):
    __tablename__ = "black_lists"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    author = relationship("User", back_populates="black_list")
    tickets = relationship("Ticket", secondary=black_list_tickets, order_by="Ticket.id")
    clients = relationship("User", secondary=black_list_clients, order_by="User.id")
    masters = relationship("User", secondary=black_list_masters, order_by="User.id")

    def blocks_user(self, user) -> bool:
        return any(u.id == user.id for u in self.clients) or any(u.id == user.id for u in self.masters)

    def blocks_ticket(self, ticket) -> bool:
        return any(t.id == ticket.id for t in self.tickets)
