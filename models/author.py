from sqlalchemy.orm import relationship
from sqlalchemy import Column, String, Date, Index

from models.base_model import BaseModel, Base, SoftDeleteMixin
from models.book import author_book


class Author(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "authors"

    name = Column(String(255), nullable=False)  # not unique; names can collide
    last_name = Column("lastName", String(255), nullable=False)
    country = Column(String(255), nullable=False)
    birth_date = Column("birthDate", Date, nullable=False)

    books = relationship("Book", secondary=author_book, back_populates="authors")

    __table_args__ = (
        Index("ix_authors_name_lastName", "name", "lastName"),
        Index("ix_authors_country", "country"),
    )

    @property
    def active_books(self) -> list:
        return [b for b in self.books if b.deleted_at is None]

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.last_name}"
