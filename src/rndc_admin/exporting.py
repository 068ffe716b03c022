from __future__ import annotations

from pathlib import Path
import io
import logging
import math
import re
import unicodedata

logger = logging.getLogger(__name__)

PAGE_MARGIN_PT = 24.0


def slugify(text: str) -> str:
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-zA-Z0-9]+", "-", normalized).strip("-").lower()
    return slug or "reporte"


def report_filename(conference_name: str, region_name: str | None = None) -> str:
    """``reporte-<conferencia>[-<region>].pdf``."""
    name = f"reporte-{slugify(conference_name)}"
    if region_name:
        name += f"-{slugify(region_name)}"
    return f"{name}.pdf"


def page_slices(image_width: int, image_height: int, page_width: float, page_height: float,
                margin: float = PAGE_MARGIN_PT) -> list[tuple[int, int]]:
    """Cortes verticales (y, alto) en píxeles para repartir la imagen en páginas.

    La imagen se escala al ancho útil de la página; cada página recibe la
    porción que cabe en su alto útil.
    """
    if image_width <= 0 or image_height <= 0:
        return []
    usable_w = page_width - 2 * margin
    usable_h = page_height - 2 * margin
    scale = usable_w / image_width
    px_per_page = max(int(usable_h / scale), 1)
    pages = math.ceil(image_height / px_per_page)
    return [
        (i * px_per_page, min(px_per_page, image_height - i * px_per_page))
        for i in range(pages)
    ]


def export_widget_pdf(widget, out_path: str | Path) -> Path:
    """Captura ``widget`` como imagen y la pagina en hojas A4."""
    from PySide6.QtCore import QBuffer, QIODevice
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.utils import ImageReader
    from reportlab.pdfgen import canvas

    out = Path(out_path)
    image = widget.grab().toImage()
    page_w, page_h = A4
    usable_w = page_w - 2 * PAGE_MARGIN_PT
    scale = usable_w / max(image.width(), 1)

    pdf = canvas.Canvas(str(out), pagesize=A4)
    pdf.setTitle(out.stem)
    for y, height in page_slices(image.width(), image.height(), page_w, page_h):
        part = image.copy(0, y, image.width(), height)
        buffer = QBuffer()
        buffer.open(QIODevice.WriteOnly)
        part.save(buffer, "PNG")
        reader = ImageReader(io.BytesIO(bytes(buffer.data())))
        draw_h = height * scale
        pdf.drawImage(reader, PAGE_MARGIN_PT, page_h - PAGE_MARGIN_PT - draw_h, width=usable_w, height=draw_h)
        pdf.showPage()
    pdf.save()
    logger.info("PDF exportado a %s", out)
    return out
