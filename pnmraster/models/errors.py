"""Исключения растрового ядра.

Принципы:
- Одна иерархия с корнем `RasterError`: вызывающий код может ловить всё сразу.
- Каждое исключение одновременно наследует стандартный тип (IndexError,
  ValueError, TypeError), чтобы не ломать привычные `except`.
"""
from __future__ import annotations


class RasterError(Exception):
    """Базовое исключение пакета."""


class OutOfBounds(RasterError, IndexError):
    """Координата вне `[0, width) x [0, height)`."""

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        super().__init__(f"Координата ({x}, {y}) вне холста {width}x{height}")
        self.x = x
        self.y = y


class InvalidGeometry(RasterError, ValueError):
    """Параметры фигуры геометрически невыполнимы."""


class InvalidSample(RasterError, ValueError):
    """Значение пикселя не подходит для вида холста."""


class UnsupportedOperation(RasterError, TypeError):
    """Операция не определена для данного вида холста."""


class NetpbmFormatError(RasterError, ValueError):
    """Некорректный текст Netpbm (P1/P2/P3)."""
