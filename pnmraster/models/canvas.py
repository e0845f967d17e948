"""Модель холста: общая пиксельная сетка для P1/P2/P3.

Принципы:
- SRP: хранение пикселей, доступ по координатам и проверка инвариантов.
  Преобразования и рисование живут в сервисах.
- Один тип холста, параметризованный видом отсчёта (`SampleKind`),
  вместо трёх несвязанных классов.

Хранилище — numpy-массив формы `(height, width)` (bool для битовой карты,
uint8 для оттенков серого) или `(height, width, 3)` для цвета.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple, Union

import numpy as np

from pnmraster.models.errors import InvalidGeometry, InvalidSample, OutOfBounds, UnsupportedOperation
from pnmraster.models.geometry import Color

Sample = Union[bool, int, Tuple[int, int, int]]

MAX_SUPPORTED_INTENSITY = 255


class SampleKind(Enum):
    """Вид отсчёта; значение — магическое число Netpbm."""
    BITMAP = "P1"
    GRAYSCALE = "P2"
    COLOR = "P3"

    @property
    def channel_depth(self) -> int:
        return 3 if self is SampleKind.COLOR else 1

    @property
    def has_intensity(self) -> bool:
        return self is not SampleKind.BITMAP

    @classmethod
    def from_magic(cls, magic: str) -> SampleKind:
        for kind in cls:
            if kind.value == magic:
                return kind
        raise ValueError(f"Неизвестное магическое число: {magic!r}")


class Canvas:
    """Прямоугольная сетка пикселей с фиксированными размерами.

    Размеры меняются только при повороте (`TransformService.rotate_90_clockwise`),
    который меняет местами ширину и высоту. Запись за пределами холста —
    ошибка `OutOfBounds`, сетка никогда не растёт.
    """

    def __init__(self, pixels: np.ndarray, kind: SampleKind, max_intensity: Optional[int]) -> None:
        self._kind = kind
        self._max_intensity = max_intensity
        self._pixels = pixels

    # ---- Конструкторы ----
    @classmethod
    def blank(
        cls,
        width: int,
        height: int,
        kind: SampleKind = SampleKind.COLOR,
        max_intensity: Optional[int] = None,
    ) -> Canvas:
        """Создаёт холст, заполненный нулями.

        Raises:
            InvalidGeometry: если ширина или высота не положительны.
            InvalidSample: если `max_intensity` не подходит для вида холста.
        """
        if width <= 0 or height <= 0:
            raise InvalidGeometry(f"Размеры холста должны быть положительными: {width}x{height}")
        max_intensity = _resolve_max_intensity(kind, max_intensity)
        shape = (height, width, 3) if kind is SampleKind.COLOR else (height, width)
        dtype = bool if kind is SampleKind.BITMAP else np.uint8
        return cls(np.zeros(shape, dtype=dtype), kind, max_intensity)

    @classmethod
    def from_array(
        cls,
        array: np.ndarray,
        kind: SampleKind,
        max_intensity: Optional[int] = None,
    ) -> Canvas:
        """Оборачивает копию готового массива после проверки формы и диапазона."""
        max_intensity = _resolve_max_intensity(kind, max_intensity)
        arr = np.asarray(array)
        expected_ndim = 3 if kind is SampleKind.COLOR else 2
        if arr.ndim != expected_ndim or (kind is SampleKind.COLOR and arr.shape[2] != 3):
            raise InvalidSample(f"Форма {arr.shape} не подходит для {kind.name}")
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise InvalidGeometry(f"Пустая сетка: {arr.shape}")

        if kind is SampleKind.BITMAP:
            if arr.dtype != bool and not np.isin(arr, (0, 1)).all():
                raise InvalidSample("Битовая карта допускает только 0/1")
            return cls(arr.astype(bool), kind, None)

        if arr.size and (arr.min() < 0 or arr.max() > max_intensity):
            raise InvalidSample(f"Интенсивности вне диапазона [0, {max_intensity}]")
        return cls(arr.astype(np.uint8), kind, max_intensity)

    # ---- Свойства ----
    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def kind(self) -> SampleKind:
        return self._kind

    @property
    def magic(self) -> str:
        return self._kind.value

    @property
    def channel_depth(self) -> int:
        return self._kind.channel_depth

    @property
    def max_intensity(self) -> Optional[int]:
        return self._max_intensity

    @property
    def pixels(self) -> np.ndarray:
        """Массив пикселей. Изменения по месту допустимы только в пределах формы."""
        return self._pixels

    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    # ---- Доступ к пикселям ----
    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def at(self, x: int, y: int) -> Sample:
        """Возвращает отсчёт в `(x, y)`: bool, int или кортеж RGB.

        Raises:
            OutOfBounds: если координата вне холста.
        """
        self._check_bounds(x, y)
        value = self._pixels[y, x]
        if self._kind is SampleKind.BITMAP:
            return bool(value)
        if self._kind is SampleKind.GRAYSCALE:
            return int(value)
        return tuple(int(c) for c in value)

    def set(self, x: int, y: int, value) -> None:
        """Заменяет отсчёт в `(x, y)`.

        Raises:
            OutOfBounds: если координата вне холста (сетка не растёт).
            InvalidSample: если значение не подходит по форме или диапазону.
        """
        self._check_bounds(x, y)
        self._pixels[y, x] = self.coerce_sample(value)

    def coerce_sample(self, value) -> Sample:
        """Проверяет значение и приводит его к виду отсчёта холста.

        Используется сервисами рисования до первой записи, чтобы
        некорректный цвет отклонялся без частичных изменений.
        """
        if self._kind is SampleKind.BITMAP:
            if isinstance(value, (bool, np.bool_)) or (isinstance(value, (int, np.integer)) and value in (0, 1)):
                return bool(value)
            raise InvalidSample(f"Битовая карта ожидает bool или 0/1, получено: {value!r}")

        if self._kind is SampleKind.GRAYSCALE:
            if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
                raise InvalidSample(f"Оттенки серого ожидают целое, получено: {value!r}")
            self._check_intensity(int(value))
            return int(value)

        try:
            rgb = Color.of(value).as_tuple()
        except (TypeError, ValueError) as exc:
            raise InvalidSample(f"Цветной холст ожидает RGB, получено: {value!r}") from exc
        for channel in rgb:
            self._check_intensity(channel)
        return rgb

    # ---- Копирование и производные ----
    def copy(self) -> Canvas:
        """Полная копия с независимым хранилищем."""
        return Canvas(self._pixels.copy(), self._kind, self._max_intensity)

    def derive_bitmap(self, threshold: Optional[int] = None) -> Canvas:
        """Битовая карта из оттенков серого: `True`, если интенсивность > порога.

        Порог по умолчанию — `max_intensity // 2`.

        Raises:
            UnsupportedOperation: если холст не в оттенках серого.
        """
        if self._kind is not SampleKind.GRAYSCALE:
            raise UnsupportedOperation(f"Битовую карту можно получить только из P2, а не из {self.magic}")
        if threshold is None:
            threshold = self._max_intensity // 2
        return Canvas(self._pixels > threshold, SampleKind.BITMAP, None)

    def set_max_intensity(self, value: int) -> None:
        """Меняет объявленный максимум без пересчёта отсчётов."""
        if not self._kind.has_intensity:
            raise UnsupportedOperation("У битовой карты нет максимальной интенсивности")
        if not 1 <= value <= MAX_SUPPORTED_INTENSITY:
            raise InvalidSample(f"Максимум должен быть в 1..{MAX_SUPPORTED_INTENSITY}: {value}")
        if int(self._pixels.max()) > value:
            raise InvalidSample(f"Есть отсчёты больше нового максимума {value}")
        self._max_intensity = value

    def replace_pixels(self, pixels: np.ndarray) -> None:
        """Подменяет хранилище массивом того же dtype и числа каналов.

        Размеры могут меняться (поворот меняет местами ширину и высоту).

        Raises:
            InvalidGeometry: если dtype, число осей или каналов не совпадают.
        """
        if (
            pixels.dtype != self._pixels.dtype
            or pixels.ndim != self._pixels.ndim
            or pixels.shape[2:] != self._pixels.shape[2:]
        ):
            raise InvalidGeometry(
                f"Массив {pixels.dtype} {pixels.shape} несовместим с холстом {self.magic}"
            )
        if 0 in pixels.shape[:2]:
            raise InvalidGeometry(f"Размеры холста должны быть положительными: {pixels.shape[:2]}")
        self._pixels = pixels

    # ---- Проверки ----
    def _check_bounds(self, x: int, y: int) -> None:
        if not self.contains(x, y):
            raise OutOfBounds(x, y, self.width, self.height)

    def _check_intensity(self, value: int) -> None:
        if not 0 <= value <= self._max_intensity:
            raise InvalidSample(f"Интенсивность {value} вне диапазона [0, {self._max_intensity}]")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Canvas):
            return NotImplemented
        return (
            self._kind is other._kind
            and self._max_intensity == other._max_intensity
            and np.array_equal(self._pixels, other._pixels)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"Canvas({self.magic}, {self.width}x{self.height}, max={self._max_intensity})"


def _resolve_max_intensity(kind: SampleKind, max_intensity: Optional[int]) -> Optional[int]:
    if kind is SampleKind.BITMAP:
        if max_intensity is not None:
            raise InvalidSample("У битовой карты нет максимальной интенсивности")
        return None
    if max_intensity is None:
        return MAX_SUPPORTED_INTENSITY
    if not 1 <= max_intensity <= MAX_SUPPORTED_INTENSITY:
        raise InvalidSample(f"Максимум должен быть в 1..{MAX_SUPPORTED_INTENSITY}: {max_intensity}")
    return max_intensity
