"""Cache bucket model - one row per named (versioned) bucket."""

CACHE_BUCKET_SEQ_DDL = "CREATE SEQUENCE IF NOT EXISTS cache_bucket_seq START 1"

CACHE_BUCKET_DDL = """
CREATE TABLE IF NOT EXISTS cache_bucket (
    id INTEGER NOT NULL DEFAULT nextval('cache_bucket_seq'),
    name VARCHAR PRIMARY KEY,
    created_at TIMESTAMP NOT NULL
)
"""
