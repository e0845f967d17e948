"""Мост между холстом и Pillow: предпросмотр, экспорт и импорт растровых файлов.

Принципы:
- SRP: только конвертация `Canvas <-> PIL.Image.Image` и загрузка с диска.
- Холст остаётся единственным владельцем своих пикселей: в обе стороны
  данные копируются.
"""
from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from pnmraster.models.canvas import MAX_SUPPORTED_INTENSITY, Canvas, SampleKind
from pnmraster.utils.logging import get_logger

logger = get_logger(__name__)


class ImageService:
    def to_pil(self, canvas: Canvas) -> Image.Image:
        """Возвращает изображение Pillow: "1" для P1, "L" для P2, "RGB" для P3.

        В P1 установленный пиксель (`True`) — чёрный. Интенсивности
        масштабируются из `[0, max_intensity]` в `[0, 255]`.
        """
        if canvas.kind is SampleKind.BITMAP:
            out = np.where(canvas.pixels, 0, 255).astype(np.uint8)
            return Image.fromarray(out).convert("1")

        scale = MAX_SUPPORTED_INTENSITY / canvas.max_intensity
        out = np.clip(np.rint(canvas.pixels.astype(np.float32) * scale), 0, 255).astype(np.uint8)
        # uint8 (h, w) -> "L", (h, w, 3) -> "RGB"
        return Image.fromarray(out)

    def from_pil(self, image: Image.Image, kind: SampleKind = SampleKind.COLOR) -> Canvas:
        """Строит холст из изображения Pillow с `max_intensity = 255`.

        Для P1 используется порог по половине максимума оттенков серого;
        тёмные пиксели становятся установленными (`True`).
        """
        if kind is SampleKind.COLOR:
            arr = np.asarray(image.convert("RGB"), dtype=np.uint8)
            return Canvas.from_array(arr, kind, MAX_SUPPORTED_INTENSITY)

        gray = Canvas.from_array(np.asarray(image.convert("L"), dtype=np.uint8), SampleKind.GRAYSCALE)
        if kind is SampleKind.GRAYSCALE:
            return gray
        bitmap = gray.derive_bitmap()
        np.logical_not(bitmap.pixels, out=bitmap.pixels)
        return bitmap

    def load_image(self, file_path: str | Path, kind: SampleKind = SampleKind.COLOR) -> Canvas:
        """Загружает любой поддерживаемый Pillow файл в холст.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ValueError: если файл не распознан как изображение.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        try:
            with Image.open(path) as pil_image:
                canvas = self.from_pil(pil_image, kind)
        except UnidentifiedImageError as exc:
            raise ValueError(f"Файл не является изображением: {path}") from exc

        logger.info("Импортировано %s: %r", path, canvas)
        return canvas

    def save_preview(self, canvas: Canvas, file_path: str | Path) -> Path:
        """Сохраняет холст в формате, определяемом расширением (PNG, BMP, ...)."""
        path = Path(file_path)
        self.to_pil(canvas).save(path)
        logger.info("Предпросмотр сохранён: %s", path)
        return path
