"""
DB connection helpers.

Uses pymysql (MySQL), psycopg (PostgreSQL) or sqlite3 (SQLite) based on product_type.
Every connection raises on error (DB-API behaviour) and runs in autocommit
mode: each statement commits on its own unless a transaction is begun explicitly.
"""

import sqlite3
from enum import Enum
from typing import Any

import psycopg
import pymysql
from pydantic import BaseModel, Field


class ProductTypeEnum(str, Enum):
    """Supported database product types (mysql, postgres, sqlite)."""

    MYSQL = "mysql"
    POSTGRES = "postgres"
    SQLITE = "sqlite"


_DEFAULT_PORTS = {
    ProductTypeEnum.MYSQL: 3306,
    ProductTypeEnum.POSTGRES: 5432,
}

# Bind marker style and identifier quote the executor needs per product
_PARAMSTYLES = {
    ProductTypeEnum.MYSQL: pymysql.paramstyle,
    ProductTypeEnum.POSTGRES: psycopg.paramstyle,
    ProductTypeEnum.SQLITE: sqlite3.paramstyle,
}

_IDENTIFIER_QUOTES = {
    ProductTypeEnum.MYSQL: "`",
    ProductTypeEnum.POSTGRES: '"',
    ProductTypeEnum.SQLITE: "`",
}


class DataSource(BaseModel):
    """Connection parameters passed through to the driver."""

    product_type: ProductTypeEnum
    host: str | None = None
    port: int | None = Field(default=None, ge=1, le=65535)
    database: str
    username: str | None = None
    password: str = ""
    connect_timeout: int = Field(default=10, ge=1)


def _get(datasource: Any, key: str) -> Any:
    """Get attribute or dict key from DataSource, dict, or Pydantic model."""
    if isinstance(datasource, dict):
        return datasource.get(key)
    return getattr(datasource, key, None)


def _resolve_product_type(
    datasource: Any, product_type: ProductTypeEnum | str | None
) -> ProductTypeEnum:
    pt = product_type or _get(datasource, "product_type")
    if pt is None:
        raise ValueError("product_type is required (from datasource or argument)")
    if isinstance(pt, str):
        return ProductTypeEnum(pt)
    return pt


def paramstyle_for(product_type: ProductTypeEnum | str) -> str:
    """DB-API paramstyle of the driver used for product_type."""
    return _PARAMSTYLES[ProductTypeEnum(product_type)]


def identifier_quote_for(product_type: ProductTypeEnum | str) -> str:
    """Character used to quote column names for product_type."""
    return _IDENTIFIER_QUOTES[ProductTypeEnum(product_type)]


def connect(
    datasource: Any,
    *,
    product_type: ProductTypeEnum | str | None = None,
) -> Any:
    """
    Open a connection from a DataSource or connection dict.

    - datasource: DataSource model or dict with host, port, database, username,
      password, and product_type (or pass product_type=).
    - product_type: override when datasource is a dict without product_type.

    SQLite only needs ``database`` (a file path or ``:memory:``); it is opened
    with ``isolation_level=None`` so BEGIN/COMMIT are issued explicitly.
    """
    pt = _resolve_product_type(datasource, product_type)
    database = _get(datasource, "database")
    timeout = _get(datasource, "connect_timeout") or 10

    if database is None:
        raise ValueError("datasource must provide database")

    if pt == ProductTypeEnum.SQLITE:
        return sqlite3.connect(database, timeout=timeout, isolation_level=None)

    host = _get(datasource, "host")
    port = _get(datasource, "port") or _DEFAULT_PORTS[pt]
    username = _get(datasource, "username")
    password = _get(datasource, "password")

    for name, val in [
        ("host", host),
        ("username", username),
    ]:
        if val is None:
            raise ValueError(f"datasource must provide {name}")
    password = password if password is not None else ""

    if pt == ProductTypeEnum.POSTGRES:
        return psycopg.connect(
            host=host,
            port=int(port),
            dbname=database,
            user=username,
            password=password,
            connect_timeout=timeout,
            autocommit=True,
        )
    if pt == ProductTypeEnum.MYSQL:
        return pymysql.connect(
            host=host,
            port=int(port),
            database=database,
            user=username,
            password=password,
            connect_timeout=timeout,
            charset="utf8mb4",
            autocommit=True,
        )
    raise ValueError(f"Unsupported product_type: {pt}")
