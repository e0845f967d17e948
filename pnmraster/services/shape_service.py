"""Составные фигуры: треугольники и многоугольники, контурные и залитые.

Принципы:
- Фигуры собираются из примитивов `RasterService`; своей растеризации здесь нет,
  кроме построчной заливки многоугольника.
- Проверка числа вершин выполняется до рисования.
"""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from pnmraster.config import RasterSettings
from pnmraster.models.canvas import Canvas
from pnmraster.models.errors import InvalidGeometry
from pnmraster.models.geometry import Point, PointLike
from pnmraster.services.raster_service import RasterService, bresenham, fill_span
from pnmraster.utils.logging import get_logger

logger = get_logger(__name__)


def bounding_box(points: Sequence[Point]) -> Tuple[int, int, int, int]:
    """Возвращает `(min_x, min_y, max_x, max_y)` набора вершин."""
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return min(xs), min(ys), max(xs), max(ys)


def scanline_intersections(points: Sequence[Point], y: int) -> List[int]:
    """X-пересечения строки `y` с рёбрами многоугольника в порядке обхода рёбер.

    Ребро `(p_i, p_j)` пересекает строку, если ровно одна из вершин строго ниже
    (`> y`), а другая — не ниже (`<= y`). Координата усекается к нулю.
    """
    intersections: List[int] = []
    count = len(points)
    for i in range(count):
        pi = points[i]
        pj = points[(i + 1) % count]
        if (pi.y > y >= pj.y) or (pj.y > y >= pi.y):
            x = pi.x + (y - pi.y) / (pj.y - pi.y) * (pj.x - pi.x)
            intersections.append(int(x))
    return intersections


class ShapeService:
    def __init__(self, raster: Optional[RasterService] = None, settings: Optional[RasterSettings] = None) -> None:
        self._raster = raster or RasterService()
        self._settings = settings or RasterSettings()

    @property
    def settings(self) -> RasterSettings:
        return self._settings

    @staticmethod
    def _vertices(points: Sequence[PointLike]) -> List[Point]:
        vertices = [Point.of(p) for p in points]
        if len(vertices) < 3:
            logger.debug("polygon rejected: %d vertices", len(vertices))
            raise InvalidGeometry(f"Многоугольник должен иметь не менее трёх вершин, получено: {len(vertices)}")
        return vertices

    # ---------- Треугольник ----------
    def draw_triangle_outline(self, canvas: Canvas, p1: PointLike, p2: PointLike, p3: PointLike, color) -> None:
        """
        Три линии: `p1 -> p2`, `p2 -> p3`, `p3 -> p1`.
        """
        canvas.coerce_sample(color)
        self._raster.draw_line(canvas, p1, p2, color)
        self._raster.draw_line(canvas, p2, p3, color)
        self._raster.draw_line(canvas, p3, p1, color)

    def draw_triangle_filled(self, canvas: Canvas, p1: PointLike, p2: PointLike, p3: PointLike, color) -> None:
        """
        Приближённая заливка треугольника проходом по рёбрам.

        Каждое ребро идёт шагами Брезенхэма, и на каждом шаге рисуется отрезок
        текущей строки от текущего x до x конечной вершины ребра. Для узких
        крутых треугольников возможны пропуски: это не точная построчная заливка.
        """
        sample = canvas.coerce_sample(color)
        a, b, c = Point.of(p1), Point.of(p2), Point.of(p3)
        pixels = canvas.pixels
        for start, end in ((a, b), (b, c), (c, a)):
            for x, y in bresenham(start, end):
                fill_span(pixels, y, x, end.x, sample)
        logger.debug("triangle filled %s %s %s", a, b, c)

    # ---------- Многоугольник ----------
    def draw_polygon_outline(self, canvas: Canvas, points: Sequence[PointLike], color) -> None:
        """
        Соединяет соседние вершины и замыкает контур от последней к первой.

        Raises:
            InvalidGeometry: если вершин меньше трёх.
        """
        vertices = self._vertices(points)
        canvas.coerce_sample(color)
        for i, start in enumerate(vertices):
            self._raster.draw_line(canvas, start, vertices[(i + 1) % len(vertices)], color)

    def draw_polygon_filled(self, canvas: Canvas, points: Sequence[PointLike], color) -> None:
        """
        Построчная заливка многоугольника в пределах его ограничивающего прямоугольника.

        Пересечения каждой строки разбиваются на пары `(2k, 2k+1)`; при
        `settings.sort_intersections` они предварительно сортируются по
        возрастанию. Без сортировки (исторический режим) пара с началом
        правее конца ничего не рисует. После заливки обводится контур, чтобы
        граничные строки, которые полуоткрытое правило пересечения не
        учитывает, принадлежали фигуре.

        Raises:
            InvalidGeometry: если вершин меньше трёх.
        """
        vertices = self._vertices(points)
        sample = canvas.coerce_sample(color)
        min_x, min_y, max_x, max_y = bounding_box(vertices)
        pixels = canvas.pixels
        sort_intersections = self._settings.sort_intersections

        for y in range(min_y, max_y + 1):
            intersections = scanline_intersections(vertices, y)
            if sort_intersections:
                intersections.sort()
            for k in range(0, len(intersections) - 1, 2):
                start_x = max(intersections[k], min_x)
                end_x = min(intersections[k + 1], max_x)
                if start_x <= end_x:
                    fill_span(pixels, y, start_x, end_x, sample)

        self.draw_polygon_outline(canvas, vertices, color)
        logger.debug(
            "polygon filled: %d vertices, bbox=(%d, %d, %d, %d), sorted=%s",
            len(vertices), min_x, min_y, max_x, max_y, sort_intersections,
        )
