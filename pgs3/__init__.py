"""pgs3 - a PostgreSQL-backed, S3-flavoured object gateway."""

__version__ = "0.1.0"
