import asyncpg

from flow_api.settings import get_settings

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS flows (
        vpc_id TEXT NOT NULL,
        src_app TEXT NOT NULL,
        dest_app TEXT NOT NULL,
        hour NUMERIC(20, 0) NOT NULL,
        bytes_tx NUMERIC(20, 0) NOT NULL DEFAULT 0,
        bytes_rx NUMERIC(20, 0) NOT NULL DEFAULT 0,
        PRIMARY KEY (vpc_id, src_app, dest_app, hour)
    );
    CREATE INDEX IF NOT EXISTS flows_hour_idx ON flows (hour);
"""


async def create_pool() -> asyncpg.Pool:
    settings = get_settings()
    return await asyncpg.create_pool(
        dsn=settings.DB_DSN,
        min_size=settings.DB_POOL_MIN_SIZE,
        max_size=settings.DB_POOL_MAX_SIZE,
    )


async def ensure_schema(pool: asyncpg.Pool) -> None:
    async with pool.acquire() as conn:
        await conn.execute(_SCHEMA)
