"""Растеризация примитивов: линия, окружность, горизонтальный отрезок, прямоугольник.

Принципы:
- Только целочисленная арифметика (Брезенхэм / метод средней точки).
- Предусловия проверяются до первой записи: отклонённый вызов не меняет холст.
- Отдельные точки за пределами холста молча отсекаются, это не ошибка.
"""
from __future__ import annotations

from typing import Iterator, Optional, Tuple

import numpy as np

from pnmraster.config import RasterSettings
from pnmraster.models.canvas import Canvas, Sample
from pnmraster.models.errors import InvalidGeometry
from pnmraster.models.geometry import Point, PointLike
from pnmraster.utils.logging import get_logger

logger = get_logger(__name__)


def bresenham(start: Point, end: Point) -> Iterator[Tuple[int, int]]:
    """Координаты 8-связной линии от `start` до `end` включительно.

    Ровно `max(dx, dy) + 1` точек.
    """
    x0, y0 = start.x, start.y
    x1, y1 = end.x, end.y
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy

    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            return
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy


def midpoint_circle(radius: int) -> Iterator[Tuple[int, int]]:
    """Смещения `(x, y)` первого октанта окружности, `y` растёт от 0 до `x`."""
    x = radius
    y = 0
    decision = 1 - radius
    while y <= x:
        yield x, y
        y += 1
        if decision <= 0:
            decision += 2 * y + 1
        else:
            x -= 1
            decision += 2 * (y - x) + 1


def plot(pixels: np.ndarray, x: int, y: int, sample: Sample) -> None:
    """Записывает точку, если она внутри сетки; иначе отбрасывает."""
    height, width = pixels.shape[:2]
    if 0 <= x < width and 0 <= y < height:
        pixels[y, x] = sample


def fill_span(pixels: np.ndarray, y: int, x_start: int, x_end: int, sample: Sample) -> None:
    """Заливает строку `y` от `x_start` до `x_end` (в любом порядке) с отсечением."""
    height, width = pixels.shape[:2]
    if not 0 <= y < height:
        return
    lo = max(min(x_start, x_end), 0)
    hi = min(max(x_start, x_end), width - 1)
    if lo <= hi:
        pixels[y, lo:hi + 1] = sample


class RasterService:
    """Линии, окружности и отрезки строк на любом виде холста.

    `color` — значение отсчёта для вида холста: `Color`/RGB-кортеж для P3,
    целое для P2, bool для P1.
    """

    def __init__(self, settings: Optional[RasterSettings] = None) -> None:
        self._settings = settings or RasterSettings()

    @property
    def settings(self) -> RasterSettings:
        return self._settings

    def _check_circle(self, canvas: Canvas, center: Point, radius: int) -> None:
        if radius <= 0:
            logger.debug("circle rejected: radius=%d", radius)
            raise InvalidGeometry(f"Радиус окружности должен быть положительным: {radius}")
        if not canvas.contains(center.x, center.y):
            logger.debug("circle rejected: center=%s outside %r", center, canvas)
            raise InvalidGeometry(f"Центр окружности ({center.x}, {center.y}) вне холста")
        if (
            center.x - radius < 0
            or center.x + radius >= canvas.width
            or center.y - radius < 0
            or center.y + radius >= canvas.height
        ):
            logger.debug("circle rejected: center=%s radius=%d exceeds %r", center, radius, canvas)
            raise InvalidGeometry(
                f"Окружность с центром ({center.x}, {center.y}) и радиусом {radius} выходит за холст"
            )

    # ---------- Линия ----------
    def draw_line(self, canvas: Canvas, p1: PointLike, p2: PointLike, color) -> None:
        """
        Линия Брезенхэма от `p1` до `p2` включительно, с отсечением по холсту.
        """
        sample = canvas.coerce_sample(color)
        start, end = Point.of(p1), Point.of(p2)
        pixels = canvas.pixels
        for x, y in bresenham(start, end):
            plot(pixels, x, y, sample)
        logger.debug("line %s -> %s", start, end)

    def draw_span(self, canvas: Canvas, y: int, x_start: int, x_end: int, color) -> None:
        """
        Горизонтальный отрезок строки `y` между `x_start` и `x_end` (в любом порядке) включительно.
        """
        sample = canvas.coerce_sample(color)
        fill_span(canvas.pixels, y, x_start, x_end, sample)

    # ---------- Окружность ----------
    def draw_circle_outline(self, canvas: Canvas, center: PointLike, radius: int, color) -> None:
        """
        Контур окружности методом средней точки с 8-кратной симметрией.

        Raises:
            InvalidGeometry: если `radius <= 0` или квадрат `center ± radius` не помещается в холст.
        """
        center = Point.of(center)
        self._check_circle(canvas, center, radius)
        sample = canvas.coerce_sample(color)
        pixels = canvas.pixels
        cx, cy = center.x, center.y
        for x, y in midpoint_circle(radius):
            for px, py in (
                (cx + x, cy + y), (cx - x, cy + y), (cx + x, cy - y), (cx - x, cy - y),
                (cx + y, cy + x), (cx - y, cy + x), (cx + y, cy - x), (cx - y, cy - x),
            ):
                plot(pixels, px, py, sample)
        logger.debug("circle outline center=%s r=%d", center, radius)

    def draw_circle_filled(self, canvas: Canvas, center: PointLike, radius: int, color) -> None:
        """
        Залитый круг: на каждом шаге — отрезки `center.x ± x` в строках `center.y ± y`.
        Верхний и нижний сегменты эти отрезки не закрывают; с
        `settings.fill_circle_caps` рисуются и зеркальные отрезки
        `center.x ± y` в строках `center.y ± x`.

        Raises:
            InvalidGeometry: те же предусловия, что у `draw_circle_outline`.
        """
        center = Point.of(center)
        self._check_circle(canvas, center, radius)
        sample = canvas.coerce_sample(color)
        pixels = canvas.pixels
        cx, cy = center.x, center.y
        caps = self._settings.fill_circle_caps
        for x, y in midpoint_circle(radius):
            fill_span(pixels, cy + y, cx - x, cx + x, sample)
            fill_span(pixels, cy - y, cx - x, cx + x, sample)
            if caps:
                fill_span(pixels, cy + x, cx - y, cx + y, sample)
                fill_span(pixels, cy - x, cx - y, cx + y, sample)
        logger.debug("circle filled center=%s r=%d caps=%s", center, radius, caps)

    # ---------- Прямоугольник ----------
    def draw_rectangle_filled(self, canvas: Canvas, corner: PointLike, width: int, height: int, color) -> None:
        """
        Залитый прямоугольник с левым верхним углом `corner`.

        Raises:
            InvalidGeometry: угол вне холста, неположительные размеры или выход за границы.
        """
        corner = Point.of(corner)
        if not canvas.contains(corner.x, corner.y):
            raise InvalidGeometry(f"Угол прямоугольника ({corner.x}, {corner.y}) вне холста")
        if width <= 0 or height <= 0:
            raise InvalidGeometry(f"Размеры прямоугольника должны быть положительными: {width}x{height}")
        if corner.x + width > canvas.width or corner.y + height > canvas.height:
            raise InvalidGeometry(f"Прямоугольник {width}x{height} в ({corner.x}, {corner.y}) выходит за холст")
        sample = canvas.coerce_sample(color)
        canvas.pixels[corner.y:corner.y + height, corner.x:corner.x + width] = sample
        logger.debug("rectangle filled corner=%s %dx%d", corner, width, height)
