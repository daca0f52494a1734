"""SQLAlchemy repository implementations."""

from coinfolio.repositories.sqlalchemy.database import (
    Base,
    get_session_factory,
    init_db,
    init_db_with_path,
    reset_database,
)
from coinfolio.repositories.sqlalchemy.portfolio_repo import SqlAlchemyPortfolioRepository

__all__ = [
    "Base",
    "get_session_factory",
    "init_db",
    "init_db_with_path",
    "reset_database",
    "SqlAlchemyPortfolioRepository",
]
