"""
Database initialization for fresh installs.

Creates the database (if missing), the schema and an admin account.
Idempotent - safe to run multiple times.

Usage:
    python -m dispatch.scripts.init_db

Environment variables:
    INIT_ADMIN_USERNAME         Admin username (default: admin)
    INIT_ADMIN_PASSWORD         Admin password (default: auto-generated)
"""

import asyncio
import os
import secrets
import sys
import traceback

import asyncpg

from dispatch.config import Settings, get_settings

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id SERIAL PRIMARY KEY,
    username VARCHAR(100) NOT NULL UNIQUE,
    password VARCHAR(255) NOT NULL,
    full_name VARCHAR(200) NOT NULL,
    role VARCHAR(20) NOT NULL DEFAULT 'worker'
        CONSTRAINT users_role_check CHECK (role IN ('admin', 'worker')),
    avatar_url VARCHAR(500),
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS sessions (
    sid VARCHAR(255) PRIMARY KEY,
    sess TEXT NOT NULL,
    expired BIGINT NOT NULL
);
CREATE INDEX IF NOT EXISTS ix_sessions_expired ON sessions (expired);

CREATE TABLE IF NOT EXISTS vehicles (
    id SERIAL PRIMARY KEY,
    name VARCHAR(200) NOT NULL,
    color VARCHAR(7) NOT NULL DEFAULT '#3b82f6',
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS appointments (
    id SERIAL PRIMARY KEY,
    title VARCHAR(200) NOT NULL DEFAULT '',
    location VARCHAR(200) NOT NULL DEFAULT '',
    address VARCHAR(300) NOT NULL DEFAULT '',
    customer_name VARCHAR(200) NOT NULL DEFAULT '',
    notes TEXT NOT NULL DEFAULT '',
    workers INTEGER[] NOT NULL DEFAULT '{}',
    vehicle_id INTEGER REFERENCES vehicles(id) ON DELETE SET NULL,
    equipment VARCHAR(200) NOT NULL DEFAULT '',
    color VARCHAR(7) NOT NULL DEFAULT '#3b82f6',
    all_day BOOLEAN NOT NULL DEFAULT FALSE,
    start_date TIMESTAMP NOT NULL,
    end_date TIMESTAMP NOT NULL,
    multi_day_group_id VARCHAR(64),
    is_first_day BOOLEAN,
    is_last_day BOOLEAN,
    job_group_id VARCHAR(64),
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS ix_appointments_start_date ON appointments (start_date);
CREATE INDEX IF NOT EXISTS ix_appointments_multi_day_group ON appointments (multi_day_group_id);
CREATE INDEX IF NOT EXISTS ix_appointments_job_group ON appointments (job_group_id);

CREATE TABLE IF NOT EXISTS absences (
    id SERIAL PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    start_date DATE NOT NULL,
    end_date DATE NOT NULL,
    reason VARCHAR(200) NOT NULL DEFAULT '',
    absence_type VARCHAR(20) NOT NULL DEFAULT 'vacation'
        CONSTRAINT absences_type_check CHECK (absence_type IN ('vacation', 'other')),
    custom_reason VARCHAR(200),
    status VARCHAR(20) NOT NULL DEFAULT 'pending'
        CONSTRAINT absences_status_check CHECK (status IN ('pending', 'approved', 'rejected')),
    requires_approval BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    CONSTRAINT absences_date_order CHECK (start_date <= end_date)
);
CREATE INDEX IF NOT EXISTS ix_absences_user ON absences (user_id);
CREATE INDEX IF NOT EXISTS ix_absences_dates ON absences (start_date, end_date);
"""


def generate_password(length: int = 16) -> str:
    """Generate a secure random password."""
    alphabet = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789!@#$%"
    return "".join(secrets.choice(alphabet) for _ in range(length))


async def ensure_database_exists(settings: Settings) -> bool:
    """Create the database if it doesn't exist."""
    conn = await asyncpg.connect(
        host=settings.db_host,
        port=settings.db_port,
        user=settings.db_user,
        password=settings.db_password,
        database="postgres",
    )
    try:
        exists = await conn.fetchval(
            "SELECT 1 FROM pg_database WHERE datname = $1", settings.db_name
        )
        if exists:
            print(f"  Database '{settings.db_name}' already exists")
            return False

        await conn.execute(f'CREATE DATABASE "{settings.db_name}"')
        print(f"  Created database '{settings.db_name}'")
        return True

    finally:
        await conn.close()


async def seed_admin(conn: asyncpg.Connection) -> None:
    """Create the admin account unless any admin exists."""
    if await conn.fetchval("SELECT 1 FROM users WHERE role = 'admin' LIMIT 1"):
        print("  Admin account already exists")
        return

    username = os.environ.get("INIT_ADMIN_USERNAME", "admin")
    password = os.environ.get("INIT_ADMIN_PASSWORD")
    if not password:
        password = generate_password()
        print("\n  *** Admin password was auto-generated. ***")
        print("  *** Set INIT_ADMIN_PASSWORD env var to control it. ***\n")
        print(f"  Admin password: {password}")

    await conn.execute(
        """
        INSERT INTO users (username, password, full_name, role)
        VALUES ($1, $2, 'Administrator', 'admin')
        ON CONFLICT (username) DO NOTHING
        """,
        username,
        password,
    )
    print(f"  Created admin account '{username}'")


async def apply_schema(settings: Settings) -> None:
    """Create tables and seed the admin account."""
    print(f"\n=== Database: {settings.db_name} ===")

    await ensure_database_exists(settings)

    conn = await asyncpg.connect(
        host=settings.db_host,
        port=settings.db_port,
        user=settings.db_user,
        password=settings.db_password,
        database=settings.db_name,
    )
    try:
        await conn.execute(SCHEMA_SQL)
        await seed_admin(conn)
        print("  Schema applied successfully")
    finally:
        await conn.close()


async def main():
    """Run database initialization."""
    settings = get_settings()

    print("=" * 50)
    print(f"{settings.app_name} Database Initialization")
    print("=" * 50)
    print(f"DB Host: {settings.db_host}:{settings.db_port}")

    try:
        await apply_schema(settings)

        print("\n" + "=" * 50)
        print("Database initialization completed successfully!")
        print("=" * 50)

    except Exception as e:
        print(f"\nERROR: Database initialization failed: {e}")
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
