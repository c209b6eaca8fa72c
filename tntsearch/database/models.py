"""SQLAlchemy models for catalog entities."""

from sqlalchemy import BigInteger, Column, DateTime, Integer, Text

from .base import Base


class TorrentModel(Base):
    """One release of the catalog.

    Rows are written once by the ingestion pipeline and never updated.
    ``category`` is a plain code, not a foreign key: codes missing from the
    category table are legal.
    """

    __tablename__ = "torrent"

    id = Column(Integer, primary_key=True, autoincrement=True)
    published_at = Column(DateTime, nullable=False, index=True)
    hash = Column(Text, nullable=False, default="", index=True)
    topic = Column(Text, nullable=False, default="")
    post = Column(Text, nullable=False, default="")
    author = Column(Text, nullable=False, default="", index=True)
    title = Column(Text, nullable=False, default="", index=True)
    description = Column(Text, nullable=False, default="")
    size = Column(BigInteger, nullable=False, default=0)
    category = Column(Integer, nullable=False, default=0, index=True)

    def __repr__(self) -> str:
        return f"<TorrentModel id={self.id} title={self.title!r}>"
