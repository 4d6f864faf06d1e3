"""
rkebridge/errors.py

Exception types raised while translating between the flat resource
representation and the typed cluster configuration:

 - ResourceError: structural failure reading or writing a flat key
 - FieldTypeError: a flat value has the wrong shape for its key
 - CertificateDecodeError: PEM text or its DER payload could not be parsed
"""

from __future__ import annotations

from typing import Optional


class ResourceError(Exception):
    """Represents a structural failure on a flat-representation key.

    Attributes:
        message (str): The error message.
        key (Optional[str]): The flat key being read or written, if known.
    """

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        """
        Initialize a ResourceError.

        Args:
            message (str): The error message describing the failure.
            key (Optional[str]): The flat key involved, if known.
        """
        super().__init__(message)
        self.key = key


class FieldTypeError(ResourceError, ValueError):
    """A flat value does not have the type its key requires."""


class CertificateDecodeError(ResourceError, ValueError):
    """PEM text is malformed or its DER payload is not a valid certificate/key."""
