"""Infrastructure — database sessions, persistence adapters, logging setup."""
