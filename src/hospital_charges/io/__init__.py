"""Database I/O: pooled connections, procedure calls and repositories."""
