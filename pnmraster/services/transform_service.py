from __future__ import annotations

import numpy as np

from pnmraster.models.canvas import Canvas, SampleKind
from pnmraster.utils.logging import get_logger

logger = get_logger(__name__)


class TransformService:
    """Геометрические преобразования холста по месту."""

    def invert(self, canvas: Canvas) -> None:
        """
        Инверсия: `v -> max_intensity - v` (по каждому каналу для цвета),
        логическое НЕ для битовой карты.
        """
        pixels = canvas.pixels
        if canvas.kind is SampleKind.BITMAP:
            np.logical_not(pixels, out=pixels)
        else:
            # uint8 не переполняется: v <= max_intensity
            np.subtract(np.uint8(canvas.max_intensity), pixels, out=pixels)
        logger.debug("invert %r", canvas)

    def flip_horizontal(self, canvas: Canvas) -> None:
        """
        Отражение слева направо; центральный столбец при нечётной ширине не меняется.
        """
        pixels = canvas.pixels
        pixels[:] = pixels[:, ::-1].copy()
        logger.debug("flip_horizontal %r", canvas)

    def flip_vertical(self, canvas: Canvas) -> None:
        """
        Отражение сверху вниз; центральная строка при нечётной высоте не меняется.
        """
        pixels = canvas.pixels
        pixels[:] = pixels[::-1].copy()
        logger.debug("flip_vertical %r", canvas)

    def rotate_90_clockwise(self, canvas: Canvas) -> None:
        """
        Поворот на 90° по часовой стрелке: `new[x][height-1-y] = old[y][x]`.
        Выделяет новую сетку и меняет местами ширину и высоту холста.
        """
        rotated = np.ascontiguousarray(np.rot90(canvas.pixels, k=-1, axes=(0, 1)))
        canvas.replace_pixels(rotated)
        logger.debug("rotate_90_clockwise -> %r", canvas)

    def rotate(self, canvas: Canvas, quarter_turns: int = 1) -> None:
        """
        Поворот на `quarter_turns` четвертей по часовой стрелке (отрицательные — против).
        """
        for _ in range(quarter_turns % 4):
            self.rotate_90_clockwise(canvas)
