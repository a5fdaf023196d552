"""Address-book records.

Both tables carry an internal ``id`` (never serialized) and a unique-indexed
string ``public_id`` assigned by the CRUD service on create.
"""

from __future__ import annotations

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from crudkit.core.orm import CrudBase, KeyMixin, PublicIdMixin


class Contact(KeyMixin, PublicIdMixin, CrudBase):
    __tablename__ = "contacts"

    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(Text)
    phone: Mapped[str | None] = mapped_column(Text)
    address: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"Contact(public_id={self.public_id!r}, full_name={self.full_name!r})"


class Tag(KeyMixin, PublicIdMixin, CrudBase):
    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"Tag(public_id={self.public_id!r}, name={self.name!r})"
