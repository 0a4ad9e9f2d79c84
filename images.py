import base64
import io

from PIL import Image, UnidentifiedImageError

from config import MAX_NOTE_IMAGES
from errors import InvalidImage


def to_data_url(raw_bytes):
    """Encode uploaded image bytes as a data URL, using the format Pillow detects."""
    try:
        img = Image.open(io.BytesIO(raw_bytes))
        fmt = img.format
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidImage(f"Not a readable image: {e}") from e
    mime = Image.MIME.get(fmt, "image/png")
    b64 = base64.b64encode(raw_bytes).decode("utf-8")
    return f"data:{mime};base64,{b64}"


def parse_data_url(image_data):
    """Split a data URL into (mime_type, raw_bytes)."""
    try:
        header, b64 = image_data.split(",", 1)
        mime = header.split(":")[1].split(";")[0]
        raw_bytes = base64.b64decode(b64, validate=True)
    except (ValueError, IndexError, AttributeError) as e:
        raise InvalidImage("Invalid image data") from e
    if not mime.startswith("image/") or not raw_bytes:
        raise InvalidImage("Invalid image data")
    return mime, raw_bytes


def append_uploads(existing, uploads, limit=MAX_NOTE_IMAGES):
    """Append uploaded data URLs in upload order, keeping at most `limit` images."""
    urls = list(existing or [])
    for url in uploads:
        if len(urls) >= limit:
            break
        urls.append(url)
    return urls


def remove_image(urls, index):
    return [url for i, url in enumerate(urls) if i != index]
