#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the richtext library.

This module defines the exception classes raised while decoding and encoding
structured text trees and while resolving the entries and assets they link to.

Exception Hierarchy
-------------------
- RichTextError (base exception)

  - ValidationError (parameter/option validation)

  - DecodeError (wire JSON cannot be turned into a node tree)
    - MalformedDocumentError (element is not an object, lacks a usable tag, too deep)
    - UnknownNodeKindError (tag present but not registered)
    - ShapeMismatchError (shape-specific field missing or of the wrong type)

  - InvariantViolationError (programming error in tree construction)

  - LinkResolutionError (the resolver itself failed)

A link that the resolver has no entity for is *not* an error; it simply stays
unresolved.

"""

from typing import Any


class RichTextError(Exception):
    """Base exception class for all richtext-specific errors.

    Catching this will catch every error raised by the library.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(RichTextError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class DecodeError(RichTextError):
    """Base exception for failures while decoding wire JSON into nodes.

    Any decode error aborts the whole decode call; no partial tree is returned.

    Parameters
    ----------
    message : str
        Description of the decode failure
    path : str, optional
        Location of the offending element, e.g. ``content[2].content[0]``
    original_error : Exception, optional
        The underlying exception, if any

    Attributes
    ----------
    path : str or None
        Where in the input the failure occurred

    """

    def __init__(self, message: str, path: str | None = None, original_error: Exception | None = None):
        """Initialize the decode error."""
        if path:
            message = f"{message} (at {path})"
        super().__init__(message, original_error=original_error)
        self.path = path


class MalformedDocumentError(DecodeError):
    """Exception raised when the input is not a structurally usable document.

    Covers elements that are not JSON objects, elements without a string
    ``nodeType``, a ``document`` nested below the root, invalid JSON text and
    nesting beyond the configured depth limit.

    """


class UnknownNodeKindError(DecodeError):
    """Exception raised when an element's tag is not in the registry.

    Parameters
    ----------
    node_type : str
        The unrecognized tag
    path : str, optional
        Location of the offending element
    message : str, optional
        Custom error message

    Attributes
    ----------
    node_type : str
        The unrecognized tag

    """

    def __init__(self, node_type: str, path: str | None = None, message: str | None = None):
        """Initialize the unknown node kind error."""
        if message is None:
            message = f"Unknown node type: '{node_type}'"
        super().__init__(message, path=path)
        self.node_type = node_type


class ShapeMismatchError(DecodeError):
    """Exception raised when a shape-specific field is missing or mistyped.

    Parameters
    ----------
    node_type : str
        Tag of the element being decoded
    field_name : str
        Name of the offending field (dotted for nested fields, e.g. ``data.uri``)
    message : str, optional
        Custom error message
    path : str, optional
        Location of the offending element

    """

    def __init__(
        self,
        node_type: str,
        field_name: str,
        message: str | None = None,
        path: str | None = None,
    ):
        """Initialize the shape mismatch error."""
        if message is None:
            message = f"Node '{node_type}' has a missing or invalid '{field_name}' field"
        super().__init__(message, path=path)
        self.node_type = node_type
        self.field_name = field_name


class InvariantViolationError(RichTextError):
    """Exception raised when a node tree breaks its own structural invariants.

    This indicates a programming error in how a tree was built (for example a
    node whose tag and concrete class disagree), not bad input. It is not
    meant to be recovered from.

    """


class LinkResolutionError(RichTextError):
    """Exception raised when the resolver fails while resolving a link.

    Parameters
    ----------
    link_type : str
        Link type being resolved (e.g. ``Entry``)
    link_id : str
        Identifier of the linked resource
    original_error : Exception, optional
        The exception raised by the resolver

    """

    def __init__(self, link_type: str, link_id: str, original_error: Exception | None = None):
        """Initialize the link resolution error."""
        message = f"Resolver failed for {link_type} '{link_id}'"
        if original_error is not None:
            message += f": {original_error}"
        super().__init__(message, original_error=original_error)
        self.link_type = link_type
        self.link_id = link_id


__all__ = [
    "RichTextError",
    "ValidationError",
    "DecodeError",
    "MalformedDocumentError",
    "UnknownNodeKindError",
    "ShapeMismatchError",
    "InvariantViolationError",
    "LinkResolutionError",
]
