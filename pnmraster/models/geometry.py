"""Параметры рисования: точка и цвет.

Обе структуры неизменяемы (`frozen=True`) и живут только в рамках вызова
рисующей операции. Везде, где ожидается `Point`/`Color`, можно передать
обычный кортеж.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple, Union

from pnmraster.models.errors import InvalidSample


@dataclass(frozen=True)
class Point:
    """Целочисленная точка `(x, y)`; y растёт вниз."""
    x: int
    y: int

    @classmethod
    def of(cls, value: PointLike) -> Point:
        if isinstance(value, Point):
            return value
        x, y = value
        return cls(int(x), int(y))

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y


@dataclass(frozen=True)
class Color:
    """RGB-тройка 8-битных интенсивностей.

    Fields:
        red, green, blue: 0..255. Проверка против `max_intensity` холста
        выполняется в момент рисования.
    """
    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        for channel in (self.red, self.green, self.blue):
            if not 0 <= channel <= 255:
                raise InvalidSample(f"Компонента цвета вне 0..255: {channel}")

    @classmethod
    def of(cls, value: ColorLike) -> Color:
        if isinstance(value, Color):
            return value
        if len(value) != 3:
            raise InvalidSample(f"Ожидалась тройка RGB, получено: {tuple(value)}")
        r, g, b = value
        return cls(int(r), int(g), int(b))

    def as_tuple(self) -> Tuple[int, int, int]:
        return self.red, self.green, self.blue


PointLike = Union[Point, Tuple[int, int], Sequence[int]]
ColorLike = Union[Color, Tuple[int, int, int], Sequence[int]]

BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)
RED = Color(255, 0, 0)
GREEN = Color(0, 255, 0)
BLUE = Color(0, 0, 255)
