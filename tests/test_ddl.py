from datetime import date

from sqlalchemy import create_engine, create_mock_engine, inspect, text

from app.views.ddl import create_views, view_sql
from app.views.registry import VIEWS


def test_all_views_are_persisted(engine):
    assert set(inspect(engine).get_view_names()) == set(VIEWS)


def test_create_views_is_rerunnable(engine):
    create_views(engine)
    assert set(inspect(engine).get_view_names()) == set(VIEWS)


def test_persisted_views_match_query_layer(seeded):
    for name in ("current_borrowings", "active_members", "books_by_genre", "book_titles", "available_books"):
        rows = seeded.execute(text(f"SELECT * FROM {name}")).mappings().all()
        assert len(rows) == len(seeded.execute(VIEWS[name].query()).all()), name


def test_persisted_available_books(seeded):
    ids = seeded.execute(text("SELECT book_id FROM available_books")).scalars().all()
    assert sorted(ids) == [1, 2, 4, 5]


def test_persisted_overdue_books_uses_engine_clock(seeded):
    rows = seeded.execute(text("SELECT borrowing_id, days_overdue FROM overdue_books")).all()
    # sample loans were due in October 2025
    expected = {1: (date.today() - date(2025, 10, 4)).days, 2: (date.today() - date(2025, 10, 12)).days}
    assert {r.borrowing_id for r in rows} == set(expected)
    for borrowing_id, days in rows:
        # CURRENT_DATE is UTC in SQLite, date.today() is local
        assert abs(days - expected[borrowing_id]) <= 1


def test_overdue_sql_reads_current_date():
    engine = create_engine("sqlite://")
    sql = view_sql("overdue_books", engine)
    assert "CURRENT_DATE" in sql
    assert "julianday" in sql


def mock_engine(url):
    return create_mock_engine(url, executor=lambda sql, *a, **kw: None)


def test_check_option_only_where_engine_enforces_it():
    assert "WITH CHECK OPTION" not in view_sql("available_books", create_engine("sqlite://"))
    assert view_sql("available_books", mock_engine("postgresql://")).endswith("WITH CHECK OPTION")
    assert view_sql("available_books", mock_engine("mysql://")).endswith("WITH CHECK OPTION")
    assert "WITH CHECK OPTION" not in view_sql("book_titles", mock_engine("postgresql://"))


def test_days_overdue_per_dialect():
    assert "(CURRENT_DATE - borrowings.due_date)" in view_sql("overdue_books", mock_engine("postgresql://"))
    assert "DATEDIFF(CURRENT_DATE, borrowings.due_date)" in view_sql("overdue_books", mock_engine("mysql://"))
    assert "DATEDIFF(CURRENT_DATE, borrowings.due_date)" in view_sql("overdue_books", mock_engine("mariadb://"))
    assert view_sql("available_books", mock_engine("mariadb://")).endswith("WITH CHECK OPTION")
