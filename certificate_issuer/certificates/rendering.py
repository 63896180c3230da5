import io
import logging
import os
from collections import namedtuple

import qrcode
import requests
from django.core.files.base import ContentFile
from django.utils import timezone
from PIL import Image, ImageDraw, ImageFont
from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .exceptions import RenderingFailure
from .identifiers import build_verification_url
from .storage import QR_DIR, certificate_storage, replace_file, template_storage

logger = logging.getLogger(__name__)

QR_CODE_SIZE = 150
QR_CODE_POSITION = (50, 50)
PAGE_SIZE = landscape(A4)
PNG_SCALE = 2

FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"

TITLE_COLOR = "#003366"
NAME_COLOR = "#0066CC"
TEXT_COLOR = "#000000"
FOOTER_COLOR = "#808080"

RASTER_BACKGROUNDS = ("PNG", "JPEG")

TextLine = namedtuple("TextLine", "text font size color space_before")


# -----------------------------
# Layout
# -----------------------------
def achievement_text(certificate):
    if certificate.achievement_title and certificate.achievement_title.strip():
        return certificate.achievement_title
    return f"For successfully completing {certificate.course_name or ''}".rstrip()


def attribution_text(certificate):
    """Instructor name, else issuer name, else None."""
    return certificate.instructor_name or certificate.issuer_name or None


def certificate_lines(certificate):
    """
    Centred text of the certificate, top to bottom.

    The completion line is left out when there is no completion date and the
    signature block is left out when there is neither instructor nor issuer.
    """
    lines = [
        TextLine("CERTIFICATE OF ACHIEVEMENT", BOLD_FONT, 32, TITLE_COLOR, 100),
        TextLine("This certificate is proudly presented to", FONT, 16, TEXT_COLOR, 40),
        TextLine(certificate.recipient_name or "", BOLD_FONT, 36, NAME_COLOR, 50),
        TextLine(achievement_text(certificate), FONT, 18, TEXT_COLOR, 45),
    ]

    if certificate.completion_date:
        completion_date = certificate.completion_date
        if timezone.is_aware(completion_date):
            completion_date = timezone.localtime(completion_date)
        completed_on = completion_date.strftime("%B %d, %Y")
        lines.append(TextLine(f"Completed on {completed_on}", FONT, 14, TEXT_COLOR, 30))

    signer = attribution_text(certificate)
    if signer:
        lines.append(TextLine("___________________", FONT, 12, TEXT_COLOR, 50))
        lines.append(TextLine(signer, FONT, 12, TEXT_COLOR, 16))

    lines.append(TextLine(f"Certificate ID: {certificate.certificate_id}", FONT, 10, FOOTER_COLOR, 40))
    return lines


# -----------------------------
# Images
# -----------------------------
def load_background_image(template):
    """
    Return the template background as an RGB Pillow image, or None.

    A missing, unreadable or non-raster background is logged and skipped.
    """
    if template is None or not template.background_path:
        return None

    if template.background_type not in RASTER_BACKGROUNDS:
        logger.warning(
            "Background type %s of template %s cannot be drawn, continuing without it",
            template.background_type, template.pk,
        )
        return None

    path = template.background_path
    try:
        if path.startswith(("http://", "https://")):
            response = requests.get(path, timeout=10)
            response.raise_for_status()
            img = Image.open(io.BytesIO(response.content))
        else:
            if not os.path.isabs(path):
                path = template_storage().path(path)
            if not os.path.exists(path):
                logger.warning("Background file missing for template %s: %s", template.pk, path)
                return None
            img = Image.open(path)
            img.load()
    except (OSError, requests.RequestException) as e:
        logger.warning("Could not add background image, continuing without it: %s", e)
        return None

    # Convert RGBA/Palette to RGB to avoid ReportLab issues
    if img.mode != "RGB":
        img = img.convert("RGB")
    return img


def build_qr_image(data, size=QR_CODE_SIZE):
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white").convert("RGB")
    return image.resize((size, size), Image.NEAREST)


def render_verification_code(certificate_id):
    """
    Write the verification QR code for a certificate id.

    Returns the storage path of the PNG, or None when it could not be made.
    """
    try:
        image = build_qr_image(build_verification_url(certificate_id))
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")

        qr_path = replace_file(
            certificate_storage(),
            f"{QR_DIR}/{certificate_id}_qr.png",
            ContentFile(buffer.getvalue()),
        )
        logger.info("QR code generated: %s", qr_path)
        return qr_path
    except Exception:
        logger.exception("Error generating QR code for certificate %s", certificate_id)
        return None


# -----------------------------
# Documents
# -----------------------------
def render_certificate_pdf(certificate, template=None, qr_code_path=None):
    """
    Render the certificate PDF and return its storage path.

    The file is always <certificate_id>.pdf; rendering again replaces it.
    """
    try:
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=PAGE_SIZE)
        c.setTitle(f"Certificate {certificate.certificate_id}")
        width, height = PAGE_SIZE

        background = load_background_image(template)
        if background is not None:
            c.drawImage(ImageReader(background), 0, 0, width=width, height=height)

        y = height
        for line in certificate_lines(certificate):
            y -= line.space_before + line.size
            c.setFont(line.font, line.size)
            c.setFillColor(HexColor(line.color))
            c.drawCentredString(width / 2, y, line.text)

        if qr_code_path:
            x, y = QR_CODE_POSITION
            c.drawImage(
                certificate_storage().path(qr_code_path),
                x, y,
                width=QR_CODE_SIZE,
                height=QR_CODE_SIZE,
            )

        c.showPage()
        c.save()

        cert_path = replace_file(
            certificate_storage(),
            f"{certificate.certificate_id}.pdf",
            ContentFile(buffer.getvalue()),
        )
        buffer.close()
    except Exception as e:
        logger.exception("Error generating PDF for certificate %s", certificate.certificate_id)
        raise RenderingFailure(f"Failed to generate PDF: {e}") from e

    logger.info("Certificate PDF generated: %s", cert_path)
    return cert_path


def render_certificate_png(certificate, template=None, qr_code_path=None):
    """Render the same layout as a PNG image and return its storage path."""
    try:
        width, height = (int(d * PNG_SCALE) for d in PAGE_SIZE)

        background = load_background_image(template)
        if background is not None:
            page = background.resize((width, height))
        else:
            page = Image.new("RGB", (width, height), "white")
        draw = ImageDraw.Draw(page)

        y = 0
        for line in certificate_lines(certificate):
            y += (line.space_before + line.size) * PNG_SCALE
            font = ImageFont.load_default(size=line.size * PNG_SCALE)
            left, top, right, bottom = draw.textbbox((0, 0), line.text, font=font)
            draw.text(((width - (right - left)) / 2, y - bottom), line.text, fill=line.color, font=font)

        if qr_code_path:
            size = QR_CODE_SIZE * PNG_SCALE
            with certificate_storage().open(qr_code_path, "rb") as f:
                qr_image = Image.open(f).convert("RGB").resize((size, size), Image.NEAREST)
            x, y = QR_CODE_POSITION
            page.paste(qr_image, (x * PNG_SCALE, height - y * PNG_SCALE - size))

        buffer = io.BytesIO()
        page.save(buffer, format="PNG")
        png_path = replace_file(
            certificate_storage(),
            f"{certificate.certificate_id}.png",
            ContentFile(buffer.getvalue()),
        )
    except Exception as e:
        logger.exception("Error generating PNG for certificate %s", certificate.certificate_id)
        raise RenderingFailure(f"Failed to generate PNG: {e}") from e

    logger.info("Certificate PNG generated: %s", png_path)
    return png_path
