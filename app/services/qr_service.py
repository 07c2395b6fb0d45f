"""QR label rendering for parts."""

import io
import os
from urllib.parse import quote

import qrcode
from PIL import Image, ImageDraw, ImageFont

from app.config import Settings
from app.models.part import Part

CAPTION_FONT_SIZE = 20
PADDING = 10


def _get_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Try system fonts, fallback to default."""
    font_paths = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
        "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
    ]
    for fp in font_paths:
        if os.path.exists(fp):
            return ImageFont.truetype(fp, size)
    return ImageFont.load_default()


class QRService:
    """Renders scannable labels that link to a part's details page."""

    def __init__(self, settings: Settings):
        self.base_url = settings.BASE_URL.rstrip("/")
        self.size = settings.QR_CODE_SIZE

    def part_url(self, part_id: str) -> str:
        return f"{self.base_url}/part/{quote(part_id, safe='')}"

    def render_qr(self, data: str) -> Image.Image:
        """Encode ``data`` as a square QR image with high error correction."""
        qr = qrcode.QRCode(version=None, error_correction=qrcode.constants.ERROR_CORRECT_H, box_size=8, border=2)
        qr.add_data(data)
        qr.make(fit=True)
        qr_img = qr.make_image(fill_color="black", back_color="white").convert("RGB")
        return qr_img.resize((self.size, self.size), Image.NEAREST)

    def render_part_label(self, part: Part) -> bytes:
        """Render a printable label: QR code on top, serial number caption below. Returns PNG bytes."""
        qr_img = self.render_qr(self.part_url(part.id))

        caption = f"Serial Number: {part.serial_number or 'N/A'}"
        font = _get_font(CAPTION_FONT_SIZE)
        caption_h = CAPTION_FONT_SIZE + 2 * PADDING

        img = Image.new("RGB", (self.size + 2 * PADDING, self.size + PADDING + caption_h), "white")
        img.paste(qr_img, (PADDING, PADDING))

        draw = ImageDraw.Draw(img)
        text_w = draw.textbbox((0, 0), caption, font=font)[2]
        text_x = max(PADDING, (img.width - text_w) // 2)
        draw.text((text_x, self.size + 2 * PADDING), caption, fill="#000000", font=font)

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()
