from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Optional

import qrcode
import requests
from qrcode.constants import ERROR_CORRECT_M
from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas as pdf_canvas

from certificates.layout import (
    COLORS,
    CertificateOptions,
    body_runs,
    certificate_title,
    justify,
    theme_color,
)
from config import AppConfig
from data.records import SystemSettings
from logs import get_logger

logger = get_logger("certificates")

PAGE_W, PAGE_H = (d / mm for d in landscape(A4))  # 297 x 210

BODY_WIDTH = 220
BODY_FONT_SIZE = 18
BODY_LINE_HEIGHT = 12

def load_image(url: Optional[str], store=None, timeout: float = 10.0) -> Optional[bytes]:
    """
    Fetch image bytes. `memory://` URLs resolve against the demo store's files.
    A failed load is logged and skipped so one broken asset never blocks a
    certificate.
    """
    if not url:
        return None
    if url.startswith("memory://"):
        files = getattr(store, "files", {}) or {}
        return files.get(url[len("memory://"):])
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
        return resp.content
    except requests.RequestException as e:
        logger.warning("image_load_failed", url=url, error=str(e))
        return None


@dataclass
class Branding:
    college_name: str
    hod_name: str
    principal_name: str
    issuing_department: str
    meet_title: str
    meet_dates: str
    verification_base: str
    images: dict[str, Optional[bytes]] = field(default_factory=dict)

    def verification_url(self, register_number: str) -> str:
        return f"{self.verification_base.rstrip('/')}/?verify={register_number.strip().upper()}"


def build_branding(settings: SystemSettings, cfg: AppConfig, store=None) -> Branding:
    """Settings row first, then config defaults for the names."""
    images = {}
    for key in ("college_logo_url", "company_logo_url", "watermark_url", "principal_signature_url", "hod_signature_url"):
        images[key] = load_image(getattr(settings, key), store=store)
    return Branding(
        college_name=settings.college_name or cfg.college_name,
        hod_name=settings.hod_name or cfg.hod_name,
        principal_name=settings.principal_name or cfg.principal_name,
        issuing_department=cfg.issuing_department,
        meet_title=cfg.meet_title,
        meet_dates=cfg.meet_dates,
        verification_base=cfg.public_base_url,
        images=images,
    )


def qr_png(text: str) -> bytes:
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, border=0, box_size=8)
    qr.add_data(text)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class _Page:
    """
    Millimetre coordinates measured from the top-left corner, the way the
    layout is specified; converts to reportlab's bottom-left points.
    """

    def __init__(self, c: pdf_canvas.Canvas):
        self.c = c

    def text(self, s: str, x: float, y: float, font: str, size: float, color: str, align: str = "left") -> None:
        self.c.setFont(font, size)
        self.c.setFillColor(HexColor(color))
        px, py = x * mm, (PAGE_H - y) * mm
        if align == "center":
            self.c.drawCentredString(px, py, s)
        else:
            self.c.drawString(px, py, s)

    def rect(self, x: float, y: float, w: float, h: float, fill: bool = False) -> None:
        self.c.rect(x * mm, (PAGE_H - y - h) * mm, w * mm, h * mm, stroke=0 if fill else 1, fill=1 if fill else 0)

    def triangle(self, *points: tuple[float, float]) -> None:
        path = self.c.beginPath()
        (x0, y0), *rest = points
        path.moveTo(x0 * mm, (PAGE_H - y0) * mm)
        for x, y in rest:
            path.lineTo(x * mm, (PAGE_H - y) * mm)
        path.close()
        self.c.drawPath(path, stroke=0, fill=1)

    def image(self, data: Optional[bytes], x: float, y: float, width: float, height: Optional[float] = None) -> Optional[float]:
        """Draw at `width`; height follows the aspect ratio. Returns the height drawn."""
        if not data:
            return None
        try:
            reader = ImageReader(io.BytesIO(data))
            iw, ih = reader.getSize()
        except Exception as e:
            logger.warning("image_decode_failed", error=str(e))
            return None
        if not iw:
            return None
        h = height if height is not None else width * ih / iw
        self.c.drawImage(reader, x * mm, (PAGE_H - y - h) * mm, width * mm, h * mm, mask="auto")
        return h


def _image_height(data: Optional[bytes], width: float) -> float:
    if not data:
        return 0.0
    try:
        iw, ih = ImageReader(io.BytesIO(data)).getSize()
    except Exception as e:
        logger.warning("image_decode_failed", error=str(e))
        return 0.0
    return width * ih / iw if iw else 0.0


def _draw_border(page: _Page, cert_type: str, color: str) -> None:
    c = page.c
    c.setStrokeColor(HexColor(color))
    c.setFillColor(HexColor(color))
    c.setLineWidth(1.5 * mm)
    page.rect(10, 10, PAGE_W - 20, PAGE_H - 20)
    c.setLineWidth(0.5 * mm)
    if cert_type == "participation":
        page.rect(12, 12, PAGE_W - 24, PAGE_H - 24)
        page.triangle((10, 10), (30, 10), (10, 30))
        page.triangle((PAGE_W - 10, PAGE_H - 10), (PAGE_W - 30, PAGE_H - 10), (PAGE_W - 10, PAGE_H - 30))
    else:
        page.rect(13, 13, PAGE_W - 26, PAGE_H - 26)
        corner = 5
        for x, y in ((10, 10), (PAGE_W - 10 - corner, 10), (10, PAGE_H - 10 - corner),
                     (PAGE_W - 10 - corner, PAGE_H - 10 - corner)):
            page.rect(x, y, corner, corner, fill=True)


def _draw_signatory(page: _Page, x: float, base_y: float, signature: Optional[bytes], name: str, title: str, institution: str) -> None:
    sig_w = 40
    sig_h = _image_height(signature, sig_w)
    if sig_h:
        page.image(signature, x - sig_w / 2, base_y - sig_h - 4, sig_w)
    gray = COLORS["gray"]
    page.text(name, x, base_y + 5, "Helvetica-Bold", 11, gray, align="center")
    page.text(title, x, base_y + 9, "Helvetica-Bold", 10, gray, align="center")
    for i, line in enumerate(simpleSplit(institution, "Helvetica", 9, 70 * mm)[:2]):
        page.text(line, x, base_y + 13 + 4 * i, "Helvetica", 9, gray, align="center")


def render_certificate(opts: CertificateOptions, branding: Branding) -> bytes:
    """Render one certificate as PDF bytes (A4 landscape)."""
    buf = io.BytesIO()
    c = pdf_canvas.Canvas(buf, pagesize=landscape(A4))
    c.setTitle(certificate_title(opts.type).title())
    c.setAuthor(branding.college_name)
    page = _Page(c)
    color = theme_color(opts.type)
    center_x = PAGE_W / 2

    _draw_border(page, opts.type, color)

    # Watermark at 20% opacity, centred
    watermark = branding.images.get("watermark_url")
    if watermark:
        size = 120
        c.saveState()
        c.setFillAlpha(0.2)
        page.image(watermark, center_x - size / 2, PAGE_H / 2 - size / 2, size)
        c.restoreState()

    # Header: logo left, QR right
    logo_y, logo_size = 20, 25
    page.image(branding.images.get("college_logo_url"), 20, logo_y, logo_size)

    qr_size = 25
    qr_x = PAGE_W - 20 - qr_size
    try:
        page.image(qr_png(branding.verification_url(opts.register_number)), qr_x, logo_y, qr_size, qr_size)
    except Exception as e:
        logger.warning("qr_render_failed", error=str(e))
        c.setStrokeColor(HexColor(COLORS["black"]))
        page.rect(qr_x, logo_y, qr_size, qr_size)
    page.text("Scan to Verify", qr_x + qr_size / 2, logo_y + qr_size + 4, "Helvetica", 8, COLORS["gray"], align="center")

    y = 25.0
    title_lines = simpleSplit(branding.college_name.upper(), "Times-Bold", 18, (PAGE_W - 100) * mm)
    for i, line in enumerate(title_lines):
        page.text(line, center_x, y + 8 * i, "Times-Bold", 18, COLORS["black"], align="center")
    y += 8 * len(title_lines)

    page.text(branding.issuing_department.upper(), center_x, y, "Helvetica-Bold", 12, COLORS["gray"], align="center")
    y += 10
    page.text(branding.meet_title.upper(), center_x, y, "Helvetica-Bold", 18, COLORS["red"], align="center")
    y += 15
    page.text(certificate_title(opts.type), center_x, y, "Times-Bold", 28, color, align="center")

    # Body
    y += 28
    start_x = (PAGE_W - BODY_WIDTH) / 2

    def measure(text: str, bold: bool) -> float:
        return stringWidth(text, "Times-BoldItalic" if bold else "Times-Roman", BODY_FONT_SIZE) / mm

    lines = justify(body_runs(opts, branding.meet_title, branding.meet_dates), BODY_WIDTH, measure)
    for line in lines:
        for word in line:
            page.text(
                word.text,
                start_x + word.x,
                y,
                "Times-BoldItalic" if word.bold else "Times-Roman",
                BODY_FONT_SIZE,
                word.color or COLORS["gray"],
            )
        y += BODY_LINE_HEIGHT

    # Footer: HOD left, sponsor centre, principal right
    footer_y = PAGE_H - 40
    base_y = footer_y - 20
    dept_title = branding.issuing_department.title().replace("Department Of", "Dept. of")
    institution = branding.college_name.title()
    _draw_signatory(page, PAGE_W * 0.20, base_y, branding.images.get("hod_signature_url"),
                    branding.hod_name, f"HOD, {dept_title}", institution)
    _draw_signatory(page, PAGE_W * 0.80, base_y, branding.images.get("principal_signature_url"),
                    branding.principal_name, "PRINCIPAL", institution)

    sponsor = branding.images.get("company_logo_url")
    if sponsor:
        page.image(sponsor, PAGE_W * 0.50 - 55 / 2, footer_y + 5, 55)

    c.showPage()
    c.save()
    logger.info("certificate_rendered", type=opts.type, register_number=opts.register_number)
    return buf.getvalue()
