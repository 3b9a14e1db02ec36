"""Core components: S3 client handles, settings and exceptions."""
