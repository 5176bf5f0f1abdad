"""
Snippetbox — User SQLAlchemy Model
====================================

What:  ORM model representing the `users` table.
Who:   Used by UserService for signup, login and session checks.

Table Design Rationale:
    - email carries a UNIQUE constraint (users_uc_email); duplicate signups
      surface as IntegrityError, which UserService translates
    - hashed_password is CHAR(60): the fixed length of a bcrypt hash
"""

from datetime import datetime

from sqlalchemy import CHAR, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base


class User(Base):
    """A registered account. Passwords are stored only as bcrypt hashes."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    hashed_password: Mapped[str] = mapped_column(CHAR(60), nullable=False)
    created: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("email", name="users_uc_email"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
