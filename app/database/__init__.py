"""
데이터베이스 모듈 초기화
"""
from .postgres_db import (
    PostgreSQLDB,
    get_postgres_db,
    init_database,
    close_database
)
from .schema import (
    Base,
    create_tables
)

__all__ = [
    "PostgreSQLDB",
    "get_postgres_db",
    "init_database",
    "close_database",
    "Base",
    "create_tables"
]
