"""
Exception hierarchy for slide conversion.

    Slide2PdfError
    ├── ConfigurationError
    ├── OutputExistsError
    ├── RenderingError
    │   ├── SlideContentUnreachable
    │   └── TraversalInterrupted
    └── DocumentAssemblyError

Configuration-shape problems in stopping rules and navigation tables are not
raised; they are logged and replaced by defaults.
"""

from typing import Any, Dict, Optional


class Slide2PdfError(Exception):
    """Base class for every error raised by the converter."""

    def __init__(self, message: str = "", context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message)


class ConfigurationError(Slide2PdfError):
    """A required setting is missing and has no default (e.g. the URL)."""


class OutputExistsError(Slide2PdfError):
    """The target document exists and overwriting was not requested."""

    def __init__(self, path: str):
        super().__init__(
            f"{path} already exists. Use --overwrite to replace it.",
            context={"path": path},
        )


class RenderingError(Slide2PdfError):
    """The rendering surface failed while a run was in progress."""

    def __init__(self, message: str, original: Optional[BaseException] = None,
                 context: Optional[Dict[str, Any]] = None):
        self.original = original
        if original is not None:
            message += f" ({type(original).__name__}: {original})"
        super().__init__(message, context=context)


class SlideContentUnreachable(RenderingError):
    """The deck could not be loaded or the first slide could not be captured."""

    def __init__(self, url: str = "", original: Optional[BaseException] = None):
        super().__init__(
            f"Could not reach slide content at {url}" if url else "Could not reach slide content",
            original=original,
            context={"url": url},
        )


class TraversalInterrupted(RenderingError):
    """Navigation or capture failed after the first slide was captured."""

    def __init__(self, slide_index: int, original: Optional[BaseException] = None):
        super().__init__(
            f"Navigation or capture failed mid-run at slide {slide_index}",
            original=original,
            context={"slide_index": slide_index},
        )


class DocumentAssemblyError(Slide2PdfError):
    """Captured images could not be assembled into the output document."""
