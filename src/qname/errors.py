"""Root exception shared by every qname error hierarchy."""


class QnameError(Exception):
    """Base exception for schema, selection, and filename failures."""
