"""SQLAlchemy ORM model definitions."""

from sqlalchemy import Column, String, DateTime, Text

from coinfolio.repositories.sqlalchemy.database import Base


class PortfolioDocumentORM(Base):
    """SQLAlchemy model for one owner's portfolio document (JSON text)."""

    __tablename__ = "portfolio_documents"

    owner_id = Column(String(255), primary_key=True)
    document = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
