from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import make_url

LOCAL_DB_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "postgres", "duomatch_postgres"})


@dataclass(frozen=True, slots=True)
class DbTargetCheck:
    is_safe: bool
    reason: str
    database_name: str
    host: str


def check_integration_db_target(database_url: str) -> DbTargetCheck:
    url = make_url(database_url)
    database_name = (url.database or "").strip()
    host = (url.host or "").strip().lower()

    if url.get_backend_name() != "postgresql":
        reason = "integration tests run against PostgreSQL only"
    elif not database_name:
        reason = "database name is empty"
    elif "test" not in database_name.lower():
        reason = "database name must contain 'test'"
    elif host not in LOCAL_DB_HOSTS:
        reason = f"host '{host}' is not a local test host"
    else:
        reason = "ok"

    return DbTargetCheck(
        is_safe=reason == "ok",
        reason=reason,
        database_name=database_name,
        host=host,
    )


def assert_safe_integration_db(database_url: str) -> None:
    check = check_integration_db_target(database_url)
    if check.is_safe:
        return

    raise RuntimeError(
        "Refusing to TRUNCATE tables outside a local test database: "
        f"{check.reason} (database='{check.database_name}', host='{check.host}')"
    )
