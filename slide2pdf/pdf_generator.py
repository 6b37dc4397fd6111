import os
import html
import logging
from typing import List, Optional, Sequence

import pdfkit
from PIL import Image

logger = logging.getLogger('slide2pdf')

RENDERERS = ("pillow", "weasyprint", "pdfkit")


class PDFGenerator:
    """Assemble slide screenshots into one PDF, one slide per page."""

    def __init__(self, renderer="pillow", quality=90):
        """
        Initialize the PDF generator.

        Args:
            renderer (str): Backend ('pillow', 'weasyprint' or 'pdfkit')
            quality (int): JPEG quality (0-100) of the embedded slide images
        """
        if renderer not in RENDERERS:
            logger.warning(f"Unknown PDF renderer: {renderer}, using pillow")
            renderer = "pillow"
        self.renderer = renderer
        self.quality = quality

    def generate_pdf(self, image_paths: Sequence[str], output_path: str) -> bool:
        """
        Generate a PDF from captured slide images.

        Args:
            image_paths (list): Screenshot files, in slide order
            output_path (str): Path to save the PDF

        Returns:
            bool: Success status
        """
        if not image_paths:
            logger.error("No slide was captured, nothing to convert")
            return False

        if self.renderer == "pillow":
            return self._generate_with_pillow(image_paths, output_path)

        images = self._compress_images(image_paths)
        if images is None:
            return False
        if self.renderer == "weasyprint":
            return self._generate_with_weasyprint(images, output_path)
        return self._generate_with_pdfkit(images, output_path)

    def _generate_with_pillow(self, image_paths, output_path):
        """Generate PDF with Pillow's multi-page PDF writer."""
        frames = []
        try:
            for path in image_paths:
                with Image.open(path) as img:
                    frames.append(img.convert("RGB"))
            first, rest = frames[0], frames[1:]
            first.save(
                output_path,
                "PDF",
                save_all=True,
                append_images=rest,
                quality=self.quality,
                resolution=96.0,
            )
            logger.info(f"PDF generated successfully: {output_path}")
            return True
        except Exception as e:
            logger.error(f"Failed to generate PDF with Pillow: {e}")
            return False
        finally:
            for frame in frames:
                frame.close()

    def _compress_images(self, image_paths) -> Optional[List[str]]:
        """Re-encode screenshots as JPEG next to the originals at the configured quality."""
        compressed = []
        try:
            for path in image_paths:
                target = os.path.splitext(path)[0] + ".jpg"
                with Image.open(path) as img:
                    img.convert("RGB").save(target, "JPEG", quality=self.quality)
                compressed.append(target)
        except OSError as e:
            logger.error(f"Failed to prepare slide images: {e}")
            return None
        return compressed

    def _slides_html(self, image_paths) -> str:
        """One full-page <img> per slide; page size follows the first image."""
        with Image.open(image_paths[0]) as img:
            width, height = img.size

        pages = "\n".join(
            f'<div class="slide"><img src="file://{html.escape(os.path.abspath(path))}"></div>'
            for path in image_paths
        )
        return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<style>
    @page {{ size: {width}px {height}px; margin: 0; }}
    html, body {{ margin: 0; padding: 0; }}
    .slide {{ width: {width}px; height: {height}px; page-break-after: always; overflow: hidden; }}
    .slide:last-child {{ page-break-after: auto; }}
    .slide img {{ width: 100%; height: 100%; display: block; }}
</style>
</head>
<body>
{pages}
</body>
</html>"""

    def _generate_with_pdfkit(self, image_paths, output_path):
        """Generate PDF using pdfkit/wkhtmltopdf."""
        with Image.open(image_paths[0]) as img:
            width, height = img.size
        options = {
            'page-width': f'{width}px',
            'page-height': f'{height}px',
            'margin-top': '0',
            'margin-right': '0',
            'margin-bottom': '0',
            'margin-left': '0',
            'encoding': 'UTF-8',
            'enable-local-file-access': None,
            'disable-smart-shrinking': None,
            'quiet': ''
        }

        try:
            pdfkit.from_string(self._slides_html(image_paths), output_path, options=options)
            logger.info(f"PDF generated successfully: {output_path}")
            return True
        except Exception as e:
            logger.error(f"Failed to generate PDF with pdfkit: {e}")
            return False

    def _generate_with_weasyprint(self, image_paths, output_path):
        """Generate PDF using WeasyPrint."""
        # Imported here: WeasyPrint loads Pango at import time.
        from weasyprint import HTML, CSS
        from weasyprint.text.fonts import FontConfiguration

        try:
            font_config = FontConfiguration()
            css = CSS(string='body { background: white; }', font_config=font_config)
            base_url = os.path.dirname(os.path.abspath(image_paths[0]))
            HTML(string=self._slides_html(image_paths), base_url=base_url).write_pdf(
                output_path, stylesheets=[css], font_config=font_config
            )
            logger.info(f"PDF generated successfully: {output_path}")
            return True
        except Exception as e:
            logger.error(f"Failed to generate PDF with WeasyPrint: {e}")
            return False
