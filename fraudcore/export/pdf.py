"""
Dashboard export: rasterized PDF and JSON snapshot.

The PDF is a single landscape A4 page holding one image of the active tab,
scaled to fit inside the page margins with its aspect ratio preserved.
"""
import logging
import shutil
import tempfile
import time
from pathlib import Path
from typing import Optional

from PIL import Image
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from fraudcore import config
from fraudcore.api.models import FraudReport, TopCase
from fraudcore.errors import ExportError
from fraudcore.export.snapshot import rasterize_tab
from fraudcore.report.derive import export_basename
from fraudcore.util.files import ensure_dir, safe_filename, write_json

logger = logging.getLogger(__name__)

PAGE_MARGIN = 10 * mm


def fit_to_page(img_w: int, img_h: int, page_w: float, page_h: float, margin: float = PAGE_MARGIN) -> tuple[float, float]:
    """Largest (width, height) with the image's aspect ratio that fits inside the margins."""
    if img_w <= 0 or img_h <= 0:
        raise ExportError("Captured image is empty")
    avail_w = page_w - 2 * margin
    avail_h = page_h - 2 * margin
    ratio = min(avail_w / img_w, avail_h / img_h)
    return img_w * ratio, img_h * ratio


def write_image_pdf(image: Image.Image, out_path: Path, title: str = "") -> Path:
    page_w, page_h = landscape(A4)
    draw_w, draw_h = fit_to_page(image.width, image.height, page_w, page_h)
    x = (page_w - draw_w) / 2
    y = page_h - PAGE_MARGIN - draw_h

    c = canvas.Canvas(str(out_path), pagesize=(page_w, page_h))
    if title:
        c.setTitle(title)
    c.drawImage(ImageReader(image), x, y, width=draw_w, height=draw_h)
    c.showPage()
    c.save()
    return out_path


def prune_exports(base: Path, max_age: Optional[float] = None, now: Optional[float] = None) -> int:
    """Delete per-export directories under base older than max_age seconds. Returns count removed."""
    max_age = config.EXPORT_MAX_AGE_SECONDS if max_age is None else max_age
    now = time.time() if now is None else now
    removed = 0
    for child in base.iterdir():
        try:
            if not child.is_dir() or now - child.stat().st_mtime < max_age:
                continue
            shutil.rmtree(child)
            removed += 1
        except OSError as e:
            logger.warning("Could not remove old export %s: %s", child, e)
    if removed:
        logger.info("Removed %d expired export dir(s) from %s", removed, base)
    return removed


def _export_path(report: FraudReport, year, quarter: Optional[int], suffix: str, export_dir: Optional[Path]) -> Path:
    base = ensure_dir(export_dir or config.EXPORT_DIR)
    prune_exports(base)
    # one directory per export, pruned by age
    target_dir = Path(tempfile.mkdtemp(dir=base))
    name = safe_filename(export_basename(report.hospital_name or report.hospital_id, year, quarter))
    return target_dir / f"{name}{suffix}"


def export_dashboard_pdf(
    report: Optional[FraudReport],
    cases: list[TopCase],
    year,
    quarter: Optional[int] = None,
    tab: str = "overview",
    export_dir: Optional[Path] = None,
    settle_seconds: Optional[float] = None,
) -> Path:
    """
    Capture the active tab and write it to Fraud_Report_<hospital>_<year>[_Q<n>].pdf.

    Raises ExportError on any failure; nothing is mutated.
    """
    if report is None:
        raise ExportError("Nothing to export yet. Run the fraud detector first.")

    delay = config.EXPORT_SETTLE_SECONDS if settle_seconds is None else settle_seconds
    if delay > 0:
        time.sleep(delay)

    try:
        image = rasterize_tab(report, cases, tab=tab, scale=config.EXPORT_SCALE)
        out_path = _export_path(report, year, quarter, ".pdf", export_dir)
        write_image_pdf(image, out_path, title=out_path.stem)
    except ExportError:
        raise
    except Exception as e:
        logger.exception("PDF export failed")
        raise ExportError(f"PDF export failed: {e}") from e

    logger.info("Exported %s (%dx%d px)", out_path.name, image.width, image.height)
    return out_path


def export_snapshot_json(
    report: Optional[FraudReport],
    cases: list[TopCase],
    year,
    quarter: Optional[int] = None,
    export_dir: Optional[Path] = None,
) -> Path:
    if report is None:
        raise ExportError("Nothing to export yet. Run the fraud detector first.")
    try:
        out_path = _export_path(report, year, quarter, ".json", export_dir)
        write_json(out_path, {
            "report": report._asdict(),
            "cases": [c._asdict() for c in cases],
        })
    except OSError as e:
        logger.exception("JSON export failed")
        raise ExportError(f"JSON export failed: {e}") from e
    return out_path
