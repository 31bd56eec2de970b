"""Generate the system-tray icon (64×64 PIL Image, in-memory)."""

from datetime import date

from PIL import Image, ImageDraw, ImageFont

ACCENT = "#0078D4"


def _fit_font(draw: ImageDraw.ImageDraw, text: str, box: int):
    """Largest truetype font that fits text into a box×box square."""
    font_size = 120
    while font_size > 10:
        try:
            font = ImageFont.truetype("segoeuib.ttf", font_size)
        except OSError:
            try:
                font = ImageFont.truetype("DejaVuSans-Bold.ttf", font_size)
            except OSError:
                return ImageFont.load_default()
        bbox = draw.textbbox((0, 0), text, font=font)
        if bbox[2] - bbox[0] <= box and bbox[3] - bbox[1] <= box:
            return font
        font_size -= 1
    return font


def create_icon_image(day: date | None = None, selected: bool = False) -> Image.Image:
    """Return a 64×64 RGBA image showing a day of month.

    A selected day is drawn white on the accent colour, today black on white.
    """
    size = 64
    bg, fg = (ACCENT, "white") if selected else ("white", "black")
    img = Image.new("RGBA", (size, size), bg)
    draw = ImageDraw.Draw(img)

    text = str((day or date.today()).day)
    font = _fit_font(draw, text, size - 8)

    # Centre the actual visible pixels (compensate for font metric offsets)
    bbox = draw.textbbox((0, 0), text, font=font)
    x = (size - (bbox[2] - bbox[0])) / 2 - bbox[0]
    y = (size - (bbox[3] - bbox[1])) / 2 - bbox[1]
    draw.text((x, y), text, fill=fg, font=font)

    return img
