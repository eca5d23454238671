"""
Screenshot encodings.

The response carries the capture untouched, since every bounding box is
measured against it. Only the copy attached to the visual model request is
shrunk: scaled to a maximum width, cut from the top at the model's height
limit, and re-encoded as JPEG.
"""
import base64
import io

from PIL import Image

WHITE = (255, 255, 255)


def _fit(img: Image.Image, max_width: int, max_height: int | None) -> Image.Image:
    width, height = img.size
    if width > max_width:
        height = max(1, int(height * max_width / width))
        img = img.resize((max_width, height), Image.LANCZOS)
    if max_height and img.height > max_height:
        img = img.crop((0, 0, img.width, max_height))
    return img


def _flatten(img: Image.Image) -> Image.Image:
    """RGB copy; transparent areas become white (JPEG has no alpha)."""
    if img.mode == "RGBA":
        flat = Image.new("RGB", img.size, WHITE)
        flat.paste(img, mask=img.getchannel("A"))
        return flat
    return img if img.mode == "RGB" else img.convert("RGB")


def optimize_screenshot(screenshot_bytes: bytes, max_width: int = 1280,
                        max_height: int | None = None, quality: int = 75) -> bytes:
    """JPEG bytes of the capture, fitted within max_width x max_height."""
    out = io.BytesIO()
    with Image.open(io.BytesIO(screenshot_bytes)) as img:
        _flatten(_fit(img, max_width, max_height)).save(
            out, format="JPEG", quality=quality, optimize=True,
        )
    return out.getvalue()


def screenshot_to_b64(screenshot_bytes: bytes, compress: bool = True,
                      max_width: int = 1280, max_height: int | None = None,
                      quality: int = 75) -> tuple[str, str]:
    """(base64 payload, media type) for a model image block."""
    if not compress:
        return base64.b64encode(screenshot_bytes).decode(), "image/png"
    jpeg = optimize_screenshot(screenshot_bytes, max_width=max_width,
                               max_height=max_height, quality=quality)
    return base64.b64encode(jpeg).decode(), "image/jpeg"


def to_data_url(screenshot_bytes: bytes) -> str:
    payload, media_type = screenshot_to_b64(screenshot_bytes, compress=False)
    return f"data:{media_type};base64,{payload}"
