"""Cache entry model - captured responses keyed by request identity."""

CACHE_ENTRY_SEQ_DDL = "CREATE SEQUENCE IF NOT EXISTS cache_entry_seq START 1"

# seq keeps insertion order for keys()
CACHE_ENTRY_DDL = """
CREATE TABLE IF NOT EXISTS cache_entry (
    seq BIGINT NOT NULL DEFAULT nextval('cache_entry_seq'),
    bucket VARCHAR NOT NULL,
    method VARCHAR NOT NULL,
    url VARCHAR NOT NULL,
    status INTEGER NOT NULL,
    status_text VARCHAR,
    headers JSON NOT NULL,
    body BLOB NOT NULL,
    response_type VARCHAR NOT NULL,
    stored_at TIMESTAMP NOT NULL,
    PRIMARY KEY (bucket, method, url)
)
"""
