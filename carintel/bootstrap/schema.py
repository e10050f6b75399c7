"""
Table and index definitions. Every statement is safe to re-run.
"""

from __future__ import annotations

from carintel.sketches.repository import SKETCHES_DDL

USERS_DDL = """
CREATE TABLE IF NOT EXISTS users (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    email VARCHAR(255) UNIQUE NOT NULL,
    password_hash VARCHAR(255) NOT NULL,
    name VARCHAR(255),
    role VARCHAR(50) NOT NULL DEFAULT 'user' CHECK (role IN ('user', 'admin')),
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
CREATE UNIQUE INDEX IF NOT EXISTS idx_users_email_lower ON users (lower(email));
"""

ACTIVITY_LOGS_DDL = """
CREATE TABLE IF NOT EXISTS activity_logs (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id UUID REFERENCES users(id) ON DELETE CASCADE,
    action VARCHAR(100) NOT NULL,
    details JSONB NOT NULL DEFAULT '{}'::jsonb,
    ip_address INET,
    user_agent TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
CREATE INDEX IF NOT EXISTS idx_activity_logs_user_id ON activity_logs (user_id);
CREATE INDEX IF NOT EXISTS idx_activity_logs_action ON activity_logs (action);
CREATE INDEX IF NOT EXISTS idx_activity_logs_created_at ON activity_logs (created_at);
"""

ANONYMOUS_SEARCHES_DDL = """
CREATE TABLE IF NOT EXISTS anonymous_searches (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    search_query VARCHAR(500),
    search_type VARCHAR(50) NOT NULL,
    search_filters JSONB DEFAULT '{}'::jsonb,
    result_count INTEGER NOT NULL DEFAULT 0,
    session_id VARCHAR(255),
    ip_address INET,
    user_agent TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
CREATE INDEX IF NOT EXISTS idx_anonymous_searches_search_type ON anonymous_searches (search_type);
CREATE INDEX IF NOT EXISTS idx_anonymous_searches_created_at ON anonymous_searches (created_at);
"""

SAVED_SEARCHES_DDL = """
CREATE TABLE IF NOT EXISTS saved_searches (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    name VARCHAR(255) NOT NULL,
    kentekens JSONB NOT NULL DEFAULT '[]'::jsonb,
    search_query VARCHAR(500),
    search_filters JSONB NOT NULL DEFAULT '{}'::jsonb,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
CREATE INDEX IF NOT EXISTS idx_saved_searches_user_id ON saved_searches (user_id);
"""

SAVED_VEHICLES_DDL = """
CREATE TABLE IF NOT EXISTS saved_vehicles (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    kenteken VARCHAR(20) NOT NULL,
    vehicle_data JSONB NOT NULL,
    notes TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    UNIQUE (user_id, kenteken)
);
CREATE INDEX IF NOT EXISTS idx_saved_vehicles_user_id ON saved_vehicles (user_id);
"""

# Order matters: everything else references users.
STATEMENTS = (
    ("users", USERS_DDL),
    ("activity_logs", ACTIVITY_LOGS_DDL),
    ("anonymous_searches", ANONYMOUS_SEARCHES_DDL),
    ("saved_searches", SAVED_SEARCHES_DDL),
    ("saved_vehicles", SAVED_VEHICLES_DDL),
    ("verkeersschetsen", SKETCHES_DDL),
)
