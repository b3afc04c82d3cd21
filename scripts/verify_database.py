"""
Raw database connectivity check.

Connects with asyncpg directly (bypassing SQLAlchemy) using DATABASE_URL and,
when set, the DB_SSL_CERT root certificate.
"""

import asyncio
import os
import ssl
import sys

import asyncpg
from dotenv import load_dotenv

load_dotenv(".env")

db_url = os.getenv("DATABASE_URL", "postgresql://root@localhost:26257/movr")
# asyncpg wants a plain postgresql:// DSN
db_url = db_url.replace("+asyncpg", "")
ssl_cert = os.getenv("DB_SSL_CERT")


async def check_db() -> int:
    print(f"Testing connection to: {db_url}")
    ssl_context = ssl.create_default_context(cafile=ssl_cert) if ssl_cert else None
    try:
        conn = await asyncpg.connect(db_url, ssl=ssl_context)
    except (OSError, asyncpg.PostgresError) as e:
        print(f"❌ Connection Failed: {e}")
        return 1

    try:
        version = await conn.fetchval("SELECT version()")
        print(f"✅ Connection Successful! {version}")
    finally:
        await conn.close()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(check_db()))
