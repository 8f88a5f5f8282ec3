"""Database schema for the document library."""

SCHEMA = """
-- Previously opened documents, keyed like the host identifies files
CREATE TABLE IF NOT EXISTS documents (
    name TEXT NOT NULL,
    size_bytes INTEGER NOT NULL,
    encoding TEXT NOT NULL,
    content TEXT NOT NULL,
    last_modified TEXT,         -- ISO timestamp, NULL when unknown
    opened_at TEXT NOT NULL,
    PRIMARY KEY (name, size_bytes)
);

CREATE INDEX IF NOT EXISTS idx_documents_opened ON documents(opened_at);
"""
