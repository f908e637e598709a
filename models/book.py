from sqlalchemy import (
    Column,
    String,
    ForeignKey,
    Table,
    Date,
    Index,
    Text,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, SoftDeleteMixin

# Association table (UUID String(36) FKs). Soft deletes never touch these rows.
author_book = Table(
    "author_book",
    Base.metadata,
    Column("author_id", String(36), ForeignKey("authors.id", ondelete="CASCADE"), primary_key=True),
    Column("book_id", String(36), ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
)


class Book(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "books"

    title = Column(String(255), nullable=False)
    published_at = Column(Date, nullable=False)
    edition = Column(String(255), nullable=True)
    cover_url = Column(Text, nullable=True)

    # Includes soft-deleted authors so historical attribution is preserved
    authors = relationship("Author", secondary=author_book, back_populates="books")

    __table_args__ = (
        Index("ix_books_title", "title"),
    )

    @property
    def active_authors(self) -> list:
        return [a for a in self.authors if a.deleted_at is None]

    def attach_authors(self, authors) -> list:
        """Add authors not linked yet; existing links are left alone.

        Returns the ids that were attached.
        """
        current = {a.id for a in self.authors}
        attached = []
        for author in authors:
            if author.id in current:
                continue
            self.authors.append(author)
            current.add(author.id)
            attached.append(author.id)
        return attached

    def sync_authors(self, authors) -> dict:
        """Make the linked authors exactly ``authors``.

        Links missing from ``authors`` are removed, new ones are added and
        unchanged ones are not touched, so only the difference is written.
        """
        wanted = {a.id for a in authors}
        detached = []
        for author in list(self.authors):
            if author.id not in wanted:
                self.authors.remove(author)
                detached.append(author.id)
        attached = self.attach_authors(authors)
        return {"attached": attached, "detached": detached}
