import os
import logging
import tempfile
from typing import List

from utils.config import ConversionSettings
from utils.logging import log_with_context
from slide2pdf.lib.controller import TraversalController
from slide2pdf.lib.exceptions import (
    ConfigurationError,
    DocumentAssemblyError,
    OutputExistsError,
    Slide2PdfError,
)
from slide2pdf.lib.navigation import validate_navigation_table
from slide2pdf.lib.session import RenderingSession
from slide2pdf.lib.stopping import build_stopping_rule
from slide2pdf.pdf_generator import PDFGenerator

logger = logging.getLogger('slide2pdf')

SCREENSHOT_FORMAT = "png"


def pad_to_three(number: int) -> str:
    """Zero-pad slide numbers up to 999 so screenshots sort in slide order."""
    if number <= 999:
        return f"{number:03d}"
    return str(number)


def prepare_output_path(typed_path: str, overwrite: bool = False) -> str:
    """
    Resolve the document path against the working directory.

    Raises:
        OutputExistsError: The file exists and ``overwrite`` is False
        ConfigurationError: The parent directory does not exist
    """
    target = os.path.abspath(os.path.expanduser(typed_path))
    if not target.lower().endswith(".pdf"):
        target += ".pdf"

    parent = os.path.dirname(target)
    if not os.path.isdir(parent):
        raise ConfigurationError(f"Output directory does not exist: {parent}", context={"path": target})

    if os.path.exists(target) and not overwrite:
        raise OutputExistsError(target)
    return target


class SlideConverter:
    def __init__(self, settings: ConversionSettings, session_factory=RenderingSession):
        """Initialize the converter with resolved settings."""
        self.settings = settings
        self.session_factory = session_factory
        self.pdf_generator = PDFGenerator(renderer=settings.renderer, quality=settings.picture_quality)

    def _screenshot_path(self, temp_dir: str, slide_index: int) -> str:
        return os.path.join(temp_dir, f"{pad_to_three(slide_index)}.{SCREENSHOT_FORMAT}")

    def convert(self) -> bool:
        """
        Capture every slide of the deck and write the PDF.

        Returns:
            bool: Success status
        """
        settings = self.settings
        try:
            if not settings.url:
                raise ConfigurationError(
                    "No URL found. Put 'url' in the config file or pass --url. Try slide2pdf --help for more help"
                )
            output_path = prepare_output_path(settings.output_path, settings.overwrite)

            # Built once: a malformed rule or table is reported here and ignored for the whole run.
            stopping_rule = build_stopping_rule(settings.stopping_rule, settings.framework)
            navigation_table = validate_navigation_table(settings.navigation_table)

            with tempfile.TemporaryDirectory(prefix="slide2pdf-") as temp_dir:
                screenshots: List[str] = []

                with self.session_factory(settings.url, width=settings.width, height=settings.height) as session:

                    def capture(slide_index: int) -> None:
                        path = self._screenshot_path(temp_dir, slide_index)
                        session.capture(path)
                        screenshots.append(path)
                        log_with_context(logger, logging.DEBUG, f"Captured slide {slide_index}",
                                         {"slide": slide_index, "path": path})

                    logger.info(f"Capturing slides from {settings.url}")
                    controller = TraversalController(
                        session,
                        capture,
                        stopping_rule=stopping_rule,
                        navigation_table=navigation_table,
                        animation_delay=settings.animation_delay,
                        max_slides=settings.max_slides,
                        url=settings.url,
                    )
                    result = controller.run()

                if result.fault is not None:
                    raise result.fault

                log_with_context(logger, logging.INFO, f"Captured {len(screenshots)} slides", {
                    "slides": len(screenshots),
                    "truncated": result.truncated,
                    "last_action": result.last_action,
                })

                logger.info("Converting screenshots to PDF (may take a while)")
                if not self.pdf_generator.generate_pdf(screenshots, output_path):
                    raise DocumentAssemblyError(f"Could not write {output_path}", context={"path": output_path})

            logger.info(f"The rendered file is available here: {output_path}")
            return True

        except Slide2PdfError as e:
            logger.error(str(e), exc_info=settings.debug)
            return False
