"""
Exceptions raised by the document layer.
"""


class QuillmarkError(Exception):
    """Base class for all Quillmark errors."""


class DocumentError(QuillmarkError):
    """A document could not be opened, rendered or written."""


class ImageDecodeError(DocumentError):
    """An image payload could not be decoded."""
