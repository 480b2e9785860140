from src.config import get_settings
from src.db.interfaces.postgresql import PostgreSQLDatabase


def make_database() -> PostgreSQLDatabase:
    """
    Create the database interface from settings and ensure its tables exist.

    Returns:
        PostgreSQLDatabase: Ready-to-use database
    """
    settings = get_settings()
    database = PostgreSQLDatabase(
        database_url=settings.postgres_database_url,
        echo=settings.postgres_echo_sql,
        pool_size=settings.postgres_pool_size,
        max_overflow=settings.postgres_max_overflow,
    )
    database.startup()
    return database
