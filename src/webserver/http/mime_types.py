"""
=============================================================================
MIME TYPES (RESOURCE CLASSIFIER)
=============================================================================

Maps a resolved resource to the Content-Type we send for it.

=============================================================================
THE TABLE
=============================================================================

    ┌────────────────────────────────────────────────────────────────────┐
    │  EXTENSION         CONTENT TYPE                                    │
    ├────────────────────────────────────────────────────────────────────┤
    │  .gif              image/gif                                       │
    │  .jpg, .jpeg       image/jpeg                                      │
    │  .png              image/png                                       │
    │  anything else     text/html   (also default page and 404 page)   │
    └────────────────────────────────────────────────────────────────────┘

Matching is a case-sensitive suffix match on the file name, so
"photo.PNG" is served as text/html. There is no content negotiation and
no fallback to the mimetypes module.

The content type also decides HOW the body is written:

    text/html    → streamed line by line through template substitution
    image/*      → copied byte-for-byte, never decoded

=============================================================================
"""

from enum import Enum

from .resource import ResolvedResource


class ContentType(Enum):
    """Content types the server knows how to send."""

    HTML = "text/html"
    GIF = "image/gif"
    JPEG = "image/jpeg"
    PNG = "image/png"

    @property
    def mime(self) -> str:
        """The value for the Content-Type header."""
        return self.value

    @property
    def is_binary(self) -> bool:
        """Binary types bypass template substitution."""
        return self is not ContentType.HTML


# Suffix → content type (case-sensitive)
EXTENSION_TYPES = {
    ".gif": ContentType.GIF,
    ".jpg": ContentType.JPEG,
    ".jpeg": ContentType.JPEG,
    ".png": ContentType.PNG,
}

DEFAULT_CONTENT_TYPE = ContentType.HTML


def content_type_for_name(filename: str) -> ContentType:
    """
    Look up the content type for a file name.

    Examples:
        >>> content_type_for_name("logo.png")
        <ContentType.PNG: 'image/png'>

        >>> content_type_for_name("index.html")
        <ContentType.HTML: 'text/html'>

        >>> content_type_for_name("LOGO.PNG")
        <ContentType.HTML: 'text/html'>
    """
    for suffix, content_type in EXTENSION_TYPES.items():
        if filename.endswith(suffix):
            return content_type
    return DEFAULT_CONTENT_TYPE


def classify(resource: ResolvedResource) -> ContentType:
    """
    Classify a resolved resource. Pure function, no I/O.

    Only FILE resources look at an extension; the default page and the
    404 page are always HTML.
    """
    if not resource.is_file:
        return DEFAULT_CONTENT_TYPE
    return content_type_for_name(resource.path.name)
