"""
mp_persistence – paginated query and declarative filter layer.

Import path convention::

    from mp_persistence.application.pagination import Page
    from mp_persistence.application.filtering import PropertyFilter, build_from_filters
    from mp_persistence.application.repository import PagedRepository
    from mp_persistence.adapters.sqlalchemy import SqlAlchemyQueryExecutor
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
