"""Unit tests for the SQLAlchemy executor.

Uses an in-memory SQLite database, no running server needed.
"""
from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column
from sqlalchemy.pool import StaticPool

from mp_persistence.adapters.memory import InMemoryQueryExecutor
from mp_persistence.adapters.sqlalchemy import (
    SqlAlchemyQueryExecutor,
    SqlAlchemySessionFactory,
    compile_predicate,
)
from mp_persistence.application.filtering import PropertyFilter
from mp_persistence.application.pagination import Page
from mp_persistence.application.repository import PagedRepository
from mp_persistence.config import PersistenceSettings
from mp_persistence.kernel.errors import EntityNotFoundError, ExecutionError, InvalidArgumentError
from mp_persistence.kernel.query import Comparison, Not, Operator, Or, Properties, RowCount

# ---------------------------------------------------------------------------
# Shared ORM base and test model
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class GenericUser(Base):
    __tablename__ = "generic_users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    login: Mapped[str] = mapped_column(String(50))
    age: Mapped[int] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(20), default="active")


class Membership(Base):
    __tablename__ = "memberships"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    group_id: Mapped[int] = mapped_column(Integer, primary_key=True)


ROWS = [
    (1, "john", "jsmith", 30, "active"),
    (2, "mary", "mjo", 25, "active"),
    (3, "joe", "joe1", 41, "locked"),
    (4, "anna", "anna", 25, "active"),
    (5, "bob", "bobby", 52, "active"),
    (6, "carl", "carl", 19, "active"),
    (7, "dora", "jojo", 33, "active"),
]


@pytest.fixture()
def session() -> Iterator[Session]:
    factory = SqlAlchemySessionFactory("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(factory.engine)
    with factory() as s:
        s.add_all(
            GenericUser(id=i, name=n, login=lg, age=a, status=st) for i, n, lg, a, st in ROWS
        )
        s.commit()
        yield s
    factory.dispose()


@pytest.fixture()
def repo(session: Session) -> PagedRepository[GenericUser]:
    return PagedRepository(SqlAlchemyQueryExecutor(session), GenericUser)


def _ids(users: list[GenericUser]) -> list[int]:
    return [u.id for u in users]


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------


class TestSessionFactory:
    def test_from_settings(self) -> None:
        factory = SqlAlchemySessionFactory.from_settings(PersistenceSettings(database_url="sqlite://"))
        with factory() as s:
            assert s is not None
        factory.dispose()


# ---------------------------------------------------------------------------
# Predicate compiler
# ---------------------------------------------------------------------------


class TestCompiler:
    def test_like_compiles_to_escaped_contains(self) -> None:
        clause = compile_predicate(GenericUser, Comparison("name", Operator.CONTAINS, "a_c%"))
        compiled = str(clause.compile(compile_kwargs={"literal_binds": True}))
        assert "LIKE" in compiled
        assert "'a/_c/%'" in compiled
        assert "ESCAPE '/'" in compiled

    def test_or_and_not(self) -> None:
        clause = compile_predicate(
            GenericUser,
            Or((Comparison("age", Operator.GT, 1), Not(Comparison("age", Operator.EQ, 2)))),
        )
        assert " OR " in str(clause)

    def test_unknown_property_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            compile_predicate(GenericUser, Comparison("nickname", Operator.EQ, "x"))


# ---------------------------------------------------------------------------
# Structural queries
# ---------------------------------------------------------------------------


class TestStructuralQueries:
    def test_find_page_with_filters(self, repo: PagedRepository[GenericUser]) -> None:
        filters = [
            PropertyFilter.parse("EQ_S_status", "active"),
            PropertyFilter.parse("LIKE_S_name_OR_login", "jo"),
        ]
        page = repo.find_page_by_filters(Page(2, order_by="id", order="asc"), filters)
        assert page.total_count == 3
        assert _ids(page.result) == [1, 2]
        assert page.total_pages == 2

    @pytest.mark.parametrize(("needle", "expected"), [("a_c", [9]), ("%", [10]), ("_", [9])])
    def test_like_wildcards_match_literally(
        self, session: Session, repo: PagedRepository[GenericUser], needle: str, expected: list[int]
    ) -> None:
        session.add_all(
            [
                GenericUser(id=8, name="abc", login="abc", age=1),
                GenericUser(id=9, name="xa_cx", login="xacx", age=1),
                GenericUser(id=10, name="50%", login="half", age=1),
            ]
        )
        session.flush()
        found = repo.find_by_filters([PropertyFilter.parse("LIKE_S_name", needle)])
        assert sorted(_ids(found)) == expected

    def test_like_agrees_with_in_memory_backend(
        self, session: Session, repo: PagedRepository[GenericUser]
    ) -> None:
        session.add(GenericUser(id=8, name="abc", login="abc", age=1))
        session.flush()
        rows = [{"id": i, "name": n} for i, n, *_ in ROWS] + [{"id": 8, "name": "abc"}]
        memory = PagedRepository(InMemoryQueryExecutor({"users": rows}), "users")

        filters = [PropertyFilter.parse("LIKE_S_name", "a_c")]
        assert _ids(repo.find_by_filters(filters)) == []
        assert memory.find_by_filters(filters) == []

    def test_multi_key_sort(self, repo: PagedRepository[GenericUser]) -> None:
        page = repo.find_page(Page(3, page_no=1, order_by="age,name", order="asc,desc"))
        assert _ids(page.result) == [6, 2, 4]

    def test_second_page(self, repo: PagedRepository[GenericUser]) -> None:
        page = repo.find_page(Page(3, page_no=3, order_by="id", order="asc"))
        assert _ids(page.result) == [7]
        assert page.total_count == 7

    def test_count_result_restores_projection_and_order(self, repo: PagedRepository[GenericUser]) -> None:
        query = repo.create_query(Comparison("age", Operator.LT, 35))
        query.set_projection(Properties(("name", "age")))
        query.set_result_transform(lambda row: f"{row[0]}/{row[1]}")
        query.add_sort("age", "desc").add_sort("name", "asc")

        assert repo.count_result(query) == 5
        assert query.fetch_all() == ["dora/33", "john/30", "anna/25", "mary/25", "carl/19"]

    def test_row_count_projection(self, session: Session) -> None:
        query = SqlAlchemyQueryExecutor(session).create_predicate_query(GenericUser)
        assert query.set_projection(RowCount()).fetch_scalar() == 7

    def test_unknown_sort_field_rejected(self, repo: PagedRepository[GenericUser]) -> None:
        with pytest.raises(InvalidArgumentError):
            repo.find_page(Page(3, order_by="nickname", order="asc"))

    def test_find_unique(self, repo: PagedRepository[GenericUser]) -> None:
        assert repo.find_unique_by("login", "jojo").name == "dora"
        assert repo.find_unique_by("login", "zzz") is None


# ---------------------------------------------------------------------------
# Text queries
# ---------------------------------------------------------------------------

SQL = "select id, name from generic_users where age < ? order by age desc, id"


class TestTextQueries:
    def test_find_page_by_query(self, repo: PagedRepository[GenericUser]) -> None:
        page = repo.find_page_by_query(Page(2, page_no=2), SQL, 35)
        assert page.total_count == 5
        assert page.result == [(2, "mary"), (4, "anna")]

    def test_named_params(self, repo: PagedRepository[GenericUser]) -> None:
        rows = repo.find_by_query(
            "select id from generic_users where status = :status order by id",
            params={"status": "locked"},
        )
        assert rows == [(3,)]

    def test_count_by_query(self, repo: PagedRepository[GenericUser]) -> None:
        assert repo.count_by_query(SQL, 26) == 3

    def test_find_unique_by_query(self, repo: PagedRepository[GenericUser]) -> None:
        assert repo.find_unique_by_query(SQL, 100) == (5, "bob")

    def test_offset_without_limit_rejected(self, session: Session) -> None:
        query = SqlAlchemyQueryExecutor(session).create_text_query("select id from generic_users")
        with pytest.raises(InvalidArgumentError):
            query.set_offset(2).fetch_all()

    def test_engine_error_is_wrapped(self, repo: PagedRepository[GenericUser]) -> None:
        with pytest.raises(ExecutionError) as info:
            repo.find_by_query("select id from missing_table")
        assert info.value.cause is not None

    def test_count_failure_is_wrapped(self, repo: PagedRepository[GenericUser]) -> None:
        with pytest.raises(ExecutionError, match="auto counted"):
            repo.count_by_query("select id from missing_table")


# ---------------------------------------------------------------------------
# Entity operations and bulk statements
# ---------------------------------------------------------------------------


class TestEntityOperations:
    def test_id_name_from_primary_key(self, repo: PagedRepository[GenericUser]) -> None:
        assert repo.id_name == "id"

    def test_composite_key_rejected(self, session: Session) -> None:
        with pytest.raises(InvalidArgumentError):
            SqlAlchemyQueryExecutor(session).id_name(Membership)

    def test_get_and_load(self, repo: PagedRepository[GenericUser]) -> None:
        assert repo.get(3).name == "joe"
        assert repo.get(99) is None
        with pytest.raises(EntityNotFoundError):
            repo.load(99)

    def test_save_inserts_and_updates(self, session: Session, repo: PagedRepository[GenericUser]) -> None:
        repo.save(GenericUser(id=8, name="eve", login="eve", age=28))
        user = repo.load(1)
        user.name = "johnny"
        repo.save(user)
        session.expire_all()
        assert repo.load(8).login == "eve"
        assert repo.load(1).name == "johnny"
        assert repo.count_by_query("select id from generic_users") == 8

    def test_delete_and_delete_by_id(self, repo: PagedRepository[GenericUser]) -> None:
        repo.delete(repo.load(2))
        repo.delete_by_id(3)
        assert repo.get(2) is None
        assert repo.get(3) is None
        assert repo.count_by_query("select id from generic_users") == 5

    def test_delete_of_transient_object_is_wrapped(self, repo: PagedRepository[GenericUser]) -> None:
        with pytest.raises(ExecutionError) as info:
            repo.delete(GenericUser(id=42, name="ghost", login="ghost", age=1))
        assert info.value.cause is not None


class TestBatchExecute:
    def test_positional_update(self, repo: PagedRepository[GenericUser]) -> None:
        affected = repo.batch_execute("update generic_users set status = ? where age > ?", "locked", 40)
        assert affected == 2
        assert repo.count_by_query("select id from generic_users where status = ?", "locked") == 2

    def test_named_delete(self, repo: PagedRepository[GenericUser]) -> None:
        assert repo.batch_execute("delete from generic_users where age = :age", params={"age": 25}) == 2
        assert repo.count_by_query("select id from generic_users") == 5

    def test_engine_error_is_wrapped(self, repo: PagedRepository[GenericUser]) -> None:
        with pytest.raises(ExecutionError):
            repo.batch_execute("delete from missing_table")
