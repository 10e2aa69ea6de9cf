import io
from typing import List, Optional

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from logger import logger

# 클래식 밈 폰트 우선, 없으면 일반적인 굵은 글꼴 사용
FONT_CANDIDATES = ["impact.ttf", "Impact.ttf", "DejaVuSans-Bold.ttf", "LiberationSans-Bold.ttf", "Arial Bold.ttf"]


class MemeGenerationError(Exception):
    """밈 이미지 합성 실패"""


def _load_font(size: int):
    for name in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _text_width(draw: ImageDraw.ImageDraw, text: str, font, stroke_width: int = 0) -> int:
    left, _, right, _ = draw.textbbox((0, 0), text, font=font, stroke_width=stroke_width)
    return right - left


def _wrap_text(draw: ImageDraw.ImageDraw, text: str, font, max_width: float) -> List[str]:
    """단어 단위로 줄바꿈합니다."""
    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}".strip()
        if current and _text_width(draw, candidate, font) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def _draw_meme_text(draw: ImageDraw.ImageDraw, text: str, width: int, height: int, is_top: bool) -> None:
    padding = width * 0.04
    max_width = width - padding * 2
    max_font_size = int(height / 8)
    min_font_size = int(max(12, height / 40))

    # 가장 긴 줄이 이미지 폭 안에 들어올 때까지 글자 크기를 줄임
    font_size = max(max_font_size, min_font_size)
    while True:
        font = _load_font(font_size)
        lines = _wrap_text(draw, text, font, max_width)
        widest = max((_text_width(draw, line, font) for line in lines), default=0)
        if widest <= max_width or font_size <= min_font_size:
            break
        font_size = max(font_size - 2, min_font_size)

    stroke_width = max(int(round(font_size / 8)), 2)
    line_height = font_size + stroke_width * 2
    y = padding if is_top else height * 0.65

    for line in lines:
        line_width = _text_width(draw, line, font, stroke_width)
        x = (width - line_width) / 2
        draw.text(
            (x, y), line, font=font,
            fill="white", stroke_width=stroke_width, stroke_fill="black",
        )
        y += line_height


def add_caption_to_image(image_bytes: bytes, top_text: Optional[str], bottom_text: Optional[str]) -> bytes:
    """원본 이미지에 상단/하단 캡션을 합성하여 PNG 바이트로 반환합니다."""
    if not image_bytes:
        raise MemeGenerationError("Image data cannot be empty")

    logger.info(f"밈 캡션 합성 시작: 상단='{top_text or '(none)'}', 하단='{bottom_text or '(none)'}'")

    try:
        with Image.open(io.BytesIO(image_bytes)) as source:
            image = source.convert("RGBA")
    except (UnidentifiedImageError, OSError) as e:
        logger.error(f"밈 이미지 로드 실패: {e}")
        raise MemeGenerationError(f"Failed to generate meme image: {e}") from e

    draw = ImageDraw.Draw(image)
    width, height = image.size

    if top_text and top_text.strip():
        _draw_meme_text(draw, top_text.strip().upper(), width, height, is_top=True)
    if bottom_text and bottom_text.strip():
        _draw_meme_text(draw, bottom_text.strip().upper(), width, height, is_top=False)

    output = io.BytesIO()
    image.save(output, format="PNG")
    result = output.getvalue()

    logger.info(f"밈 생성 완료: 출력 크기={len(result)} bytes")
    return result
