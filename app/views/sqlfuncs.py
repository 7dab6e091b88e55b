from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement
from sqlalchemy.types import Integer


class days_between(FunctionElement):
    """``days_between(start, end)``: whole calendar days from ``start`` to ``end``.

    Both arguments must be DATE expressions; the difference is taken on
    calendar days, never on timestamps.
    """
    type = Integer()
    name = "days_between"
    inherit_cache = True


def _args(element, compiler, **kw):
    start, end = list(element.clauses)
    return compiler.process(start, **kw), compiler.process(end, **kw)


@compiles(days_between)
def _days_between_default(element, compiler, **kw):
    # DATE - DATE yields an integer day count on PostgreSQL and most ANSI engines
    start, end = _args(element, compiler, **kw)
    return f"({end} - {start})"


@compiles(days_between, "sqlite")
def _days_between_sqlite(element, compiler, **kw):
    start, end = _args(element, compiler, **kw)
    return f"CAST(julianday({end}) - julianday({start}) AS INTEGER)"


@compiles(days_between, "mysql")
@compiles(days_between, "mariadb")
def _days_between_mysql(element, compiler, **kw):
    start, end = _args(element, compiler, **kw)
    return f"DATEDIFF({end}, {start})"
