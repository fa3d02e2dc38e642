"""Database connection and session management."""

import ssl
from collections.abc import AsyncGenerator
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from releasegate.config import settings


def make_ssl_context(verify: bool = True) -> ssl.SSLContext:
    """Client TLS context. Verification is skipped only when explicitly disabled."""
    ctx = ssl.create_default_context()
    if not verify:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    return ctx


def get_engine_url_and_connect_args(
    database_url: str, verify_ssl: bool = True
) -> tuple[str, dict]:
    """
    Move TLS settings out of the URL into asyncpg connect_args.

    asyncpg rejects `sslmode`; any `ssl`/`sslmode` query option is stripped
    and replaced by an SSLContext, verified unless `verify_ssl` is False.
    """
    parsed = urlparse(database_url)
    query = parse_qs(parsed.query)
    if "sslmode" not in query and "ssl" not in query:
        return database_url, {}
    modes = query.pop("sslmode", []) + query.pop("ssl", [])
    url = urlunparse(parsed._replace(query=urlencode(query, doseq=True)))
    if all(mode in ("disable", "false") for mode in modes):
        return url, {}
    return url, {"ssl": make_ssl_context(verify_ssl)}


_db_url, _connect_args = get_engine_url_and_connect_args(
    settings.database_url, settings.database_ssl_verify
)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


engine = create_async_engine(
    _db_url,
    echo=settings.log_level == "DEBUG",
    connect_args=_connect_args,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for database sessions."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
