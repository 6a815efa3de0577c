"""
Custom exceptions for the Cloudinary client library.
"""


class CloudinaryClientError(Exception):
    """Base exception for Cloudinary client errors."""
    pass


class ConfigurationError(CloudinaryClientError):
    """Raised when client configuration is invalid."""
    pass


class ConnectionStringParseError(CloudinaryClientError):
    """Raised when a cloudinary:// connection string cannot be parsed."""
    pass


class TransportError(CloudinaryClientError):
    """Raised when the request never got a response from the service."""
    pass


class PartConstructionError(CloudinaryClientError):
    """Raised when a file stream cannot be attached to a multipart form."""
    pass


class MalformedResponseError(CloudinaryClientError):
    """Raised when a response matches neither the success nor the error shape."""

    def __init__(self, message: str, raw: str):
        super().__init__(message)
        self.raw = raw


class ServiceReportedError(CloudinaryClientError):
    """Raised when unwrapping a failure outcome reported by the service."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
