"""
Snippetbox — Snippet SQLAlchemy Model
=======================================

What:  ORM model representing the `snippets` table.
Why:   Maps Python objects to database rows for the data-access layer.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by SnippetService and by Alembic for schema management.

Table Design Rationale:
    - Integer auto-increment primary key: ids appear in URLs (/snippet/view/3)
    - title: VARCHAR(100), the form rejects longer titles
    - content: TEXT, no artificial length limit
    - created / expires: naive DATETIME holding UTC, written by the database clock

    Index on created:
        Serves the "latest ten" query (ORDER BY created DESC LIMIT 10).
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base


class Snippet(Base):
    """
    A stored text item with title, content, creation time, and expiration time.

    Lifecycle:
        1. Inserted with created = UTC now, expires = created + N days
        2. Visible while expires > UTC now
        3. Never updated or deleted; expired rows are simply filtered out

    Query Patterns:
        - Get one: WHERE expires > UTC_TIMESTAMP() AND id = ?
        - Latest:  WHERE expires > UTC_TIMESTAMP() ORDER BY created DESC LIMIT 10
    """

    __tablename__ = "snippets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(100), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Populated with utc_now() / utc_days_from_now() at insert time
    created: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    expires: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        Index("idx_snippets_created", "created"),
    )

    def __repr__(self) -> str:
        return f"<Snippet(id={self.id}, title='{self.title}', expires='{self.expires}')>"
