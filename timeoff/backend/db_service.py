"""
Database service layer for durable ledger storage.
Handles connection pooling and a single JSONB key-value table using psycopg2.
Each logical key holds a whole collection and is replaced in full on write.
"""
from typing import Any, Optional
from psycopg2.pool import SimpleConnectionPool
from psycopg2.extras import Json

import config

# Database connection pool
pool = None


def init_db(database_url: str = None):
    """Initialize database connection pool"""
    global pool
    pool = SimpleConnectionPool(1, 5, database_url or config.DATABASE_URL)


def close_db():
    """Close database connection pool"""
    global pool
    if pool:
        pool.closeall()
        pool = None


def get_connection():
    """Get a connection from the pool"""
    return pool.getconn()


def return_connection(conn):
    """Return a connection to the pool"""
    pool.putconn(conn)


def ensure_schema() -> None:
    """Create the key-value table if it does not exist yet"""
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value JSONB NOT NULL,
                    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
                )
            """)
            conn.commit()
    finally:
        return_connection(conn)


# ==================== KEY-VALUE OPERATIONS ====================

def get_value(key: str) -> Optional[Any]:
    """Get the decoded JSON value stored under key, or None if absent"""
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute("SELECT value FROM kv_store WHERE key = %s", (key,))
            row = cur.fetchone()
            return row[0] if row else None
    finally:
        return_connection(conn)


def put_value(key: str, value: Any) -> None:
    """Replace the value stored under key"""
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute("""
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (%s, %s, now())
                ON CONFLICT (key) DO UPDATE
                SET value = EXCLUDED.value, updated_at = EXCLUDED.updated_at
            """, (key, Json(value)))
            conn.commit()
    finally:
        return_connection(conn)

