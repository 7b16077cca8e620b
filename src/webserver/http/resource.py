"""
=============================================================================
RESOURCE RESOLUTION
=============================================================================

Turns a parsed request line into the thing we are going to send back.

=============================================================================
THREE OUTCOMES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       resolve(request, root)                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   method != GET or no target?  ──yes──►  NOT_FOUND                  │
    │            │ no                                                      │
    │            ▼                                                         │
    │   strip leading "/" from target                                     │
    │            │                                                         │
    │            ▼                                                         │
    │   root/relative is a file?     ──yes──►  FILE(root/relative)        │
    │            │ no                                                      │
    │            ▼                                                         │
    │   target == "/" exactly?       ──yes──►  DEFAULT_PAGE               │
    │            │ no                                                      │
    │            ▼                                                         │
    │        NOT_FOUND                                                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

"Is a file" means: exists and is not a directory.

The result is a value, not handler state. The status line and the body
are both chosen from the same ResolvedResource, so they cannot disagree.

=============================================================================
NO PATH NORMALIZATION
=============================================================================

The relative path is joined to the document root as-is. "..", repeated
slashes and absolute paths are not rewritten or rejected.

=============================================================================
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .request import RequestLine
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class ResourceKind(Enum):
    """Which variant a ResolvedResource holds."""
    FILE = "file"                  # An existing, non-directory path
    DEFAULT_PAGE = "default_page"  # Target was exactly "/"
    NOT_FOUND = "not_found"        # Everything else


@dataclass(frozen=True)
class ResolvedResource:
    """
    Outcome of mapping a request target to something we can serve.

    Exactly one variant holds. Use the constructors instead of building
    instances by hand:

        ResolvedResource.file(Path("index.html"))
        ResolvedResource.default_page()
        ResolvedResource.not_found()

    Attributes:
        kind: Which variant this is.
        path: Filesystem path, set only for FILE.
    """

    kind: ResourceKind
    path: Optional[Path] = None

    def __post_init__(self):
        if (self.kind is ResourceKind.FILE) != (self.path is not None):
            raise ValueError(f"path must be set exactly when kind is FILE, got {self!r}")

    @classmethod
    def file(cls, path: Path) -> "ResolvedResource":
        return cls(ResourceKind.FILE, Path(path))

    @classmethod
    def default_page(cls) -> "ResolvedResource":
        return cls(ResourceKind.DEFAULT_PAGE)

    @classmethod
    def not_found(cls) -> "ResolvedResource":
        return cls(ResourceKind.NOT_FOUND)

    @property
    def is_file(self) -> bool:
        return self.kind is ResourceKind.FILE

    @property
    def status(self) -> HTTPStatus:
        """
        Response status for this resource.

        The single source for both the status line and the body choice.
        """
        if self.kind is ResourceKind.NOT_FOUND:
            return HTTPStatus.NOT_FOUND
        return HTTPStatus.OK


def relative_path(target: str) -> str:
    """
    Strip the leading "/" from a request target.

    A target without a leading slash is used unchanged.

        >>> relative_path("/images/logo.png")
        'images/logo.png'
        >>> relative_path("/")
        ''
    """
    if target.startswith("/"):
        return target[1:]
    return target


def _is_servable(path: Path) -> bool:
    """True if path exists and is not a directory. Stat errors count as missing."""
    try:
        return path.exists() and not path.is_dir()
    except OSError as e:
        logger.debug(f"Cannot stat {str(path)[:80]!r}: {e.strerror}")
        return False


def resolve(request: RequestLine, root: Path) -> ResolvedResource:
    """
    Resolve a request line against a document root.

    Args:
        request: Parsed request line.
        root: Directory that relative targets are looked up in.

    Returns:
        The ResolvedResource for this request. Never raises for a missing
        or unreadable path; those resolve to NOT_FOUND.
    """
    if not (request.is_get and request.is_well_formed):
        logger.debug(f"Not a servable request: {request.raw!r}")
        return ResolvedResource.not_found()

    path = root / relative_path(request.target)

    # An empty relative path joins to the root itself, which is a
    # directory, so "/" falls through to the default page below.
    if _is_servable(path):
        return ResolvedResource.file(path)

    if request.target == "/":
        return ResolvedResource.default_page()

    return ResolvedResource.not_found()
