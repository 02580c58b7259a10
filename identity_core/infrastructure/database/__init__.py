"""Database engine, per-request sessions and the SQL unit of work."""
