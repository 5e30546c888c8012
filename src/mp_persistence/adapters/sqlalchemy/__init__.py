"""SQLAlchemy adapter – session factory, predicate compiler and query executor."""
from mp_persistence.adapters.sqlalchemy.compiler import column_for, compile_predicate
from mp_persistence.adapters.sqlalchemy.executor import (
    SqlAlchemyQuery,
    SqlAlchemyQueryExecutor,
    SqlAlchemyTextQuery,
)
from mp_persistence.adapters.sqlalchemy.session import SqlAlchemySessionFactory

__all__ = [
    "SqlAlchemyQuery",
    "SqlAlchemyQueryExecutor",
    "SqlAlchemySessionFactory",
    "SqlAlchemyTextQuery",
    "column_for",
    "compile_predicate",
]
