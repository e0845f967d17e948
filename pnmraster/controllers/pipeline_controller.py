"""Контроллер конвейера: разбор операций и их применение к холсту.

SOLID:
- SRP: контроллер только связывает сервисы; растеризации и разбора файлов здесь нет.
- DIP: сервисы передаются в конструктор и могут быть подменены в тестах.

Формат операции: `имя[:a,b,c...][@значение]`, например `line:0,0,10,5@255,0,0`,
`rotate:2`, `fill-polygon:0,0,8,0,4,6@1`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from pnmraster.config import CliSettings
from pnmraster.models.canvas import Canvas, Sample, SampleKind
from pnmraster.models.geometry import Point
from pnmraster.services.image_service import ImageService
from pnmraster.services.netpbm_service import NetpbmService
from pnmraster.services.raster_service import RasterService
from pnmraster.services.shape_service import ShapeService
from pnmraster.services.transform_service import TransformService
from pnmraster.utils.logging import get_logger

logger = get_logger(__name__)

NETPBM_SUFFIXES = {".pbm", ".pgm", ".ppm", ".pnm"}


class OperationSyntaxError(ValueError):
    """Строка операции не разобрана."""


@dataclass(frozen=True)
class Operation:
    """Разобранная операция конвейера."""
    name: str
    args: Tuple[int, ...] = ()
    value: Optional[Tuple[int, ...]] = None

    @classmethod
    def parse(cls, spec: str) -> Operation:
        text = spec.strip()
        value: Optional[Tuple[int, ...]] = None
        if "@" in text:
            text, raw_value = text.split("@", 1)
            value = _parse_ints(raw_value, spec)
            if len(value) not in (1, 3):
                raise OperationSyntaxError(f"Значение должно состоять из 1 или 3 чисел: {spec!r}")
        name, _, raw_args = text.partition(":")
        args = _parse_ints(raw_args, spec) if raw_args else ()
        if not name:
            raise OperationSyntaxError(f"Пустое имя операции: {spec!r}")
        return cls(name=name.lower(), args=args, value=value)


def _parse_ints(raw: str, spec: str) -> Tuple[int, ...]:
    try:
        return tuple(int(part) for part in raw.split(","))
    except ValueError as exc:
        raise OperationSyntaxError(f"Ожидались целые числа через запятую: {spec!r}") from exc


def _points(args: Tuple[int, ...]) -> List[Point]:
    return [Point(args[i], args[i + 1]) for i in range(0, len(args), 2)]


@dataclass
class PipelineController:
    """Применяет последовательность операций к холсту.

    Ответственности:
    - Загрузка холста (Netpbm или любой формат Pillow).
    - Разбор и применение операций через сервисы.
    - Сохранение результата и, при необходимости, предпросмотра.
    """
    settings: CliSettings = field(default_factory=CliSettings)
    netpbm: NetpbmService = field(default_factory=NetpbmService)
    images: ImageService = field(default_factory=ImageService)
    transforms: TransformService = field(default_factory=TransformService)
    raster: Optional[RasterService] = None
    shapes: Optional[ShapeService] = None

    def __post_init__(self) -> None:
        if self.raster is None:
            self.raster = RasterService(self.settings.raster)
        if self.shapes is None:
            self.shapes = ShapeService(self.raster, self.settings.raster)

    # ---- Public API ----
    def load(self, file_path: str | Path, kind: SampleKind = SampleKind.COLOR) -> Canvas:
        path = Path(file_path)
        if path.suffix.lower() in NETPBM_SUFFIXES:
            return self.netpbm.load(path)
        return self.images.load_image(path, kind)

    def apply_all(self, canvas: Canvas, specs: Iterable[str]) -> Canvas:
        for spec in specs:
            canvas = self.apply(canvas, Operation.parse(spec))
        return canvas

    def apply(self, canvas: Canvas, op: Operation) -> Canvas:
        """Применяет одну операцию и возвращает холст (новый только для `to-bitmap`)."""
        handler = self._handlers().get(op.name)
        if handler is None:
            raise OperationSyntaxError(f"Неизвестная операция: {op.name}")
        logger.debug("apply %s args=%s value=%s", op.name, op.args, op.value)
        result = handler(canvas, op)
        return canvas if result is None else result

    def run(self, source: str | Path, target: str | Path, specs: Iterable[str],
            kind: SampleKind = SampleKind.COLOR) -> Canvas:
        canvas = self.load(source, kind)
        canvas = self.apply_all(canvas, specs)
        self.netpbm.save(canvas, target, comment=self.settings.comment)
        if self.settings.preview_path is not None:
            self.images.save_preview(canvas, self.settings.preview_path)
        return canvas

    # ---- Helpers ----
    def _handlers(self) -> Dict[str, Callable[[Canvas, Operation], Optional[Canvas]]]:
        return {
            "invert": lambda c, op: self.transforms.invert(c),
            "flip": lambda c, op: self.transforms.flip_horizontal(c),
            "flop": lambda c, op: self.transforms.flip_vertical(c),
            "rotate": lambda c, op: self.transforms.rotate(c, self._arity(op, 0, 1)[0] if op.args else 1),
            "to-bitmap": lambda c, op: c.derive_bitmap(self._arity(op, 0, 1)[0] if op.args else None),
            "line": lambda c, op: self.raster.draw_line(c, *_points(self._arity(op, 4)), self._value(c, op)),
            "circle": self._circle,
            "fill-circle": self._circle,
            "rect": lambda c, op: self._rect(c, op),
            "triangle": lambda c, op: self.shapes.draw_triangle_outline(
                c, *_points(self._arity(op, 6)), self._value(c, op)),
            "fill-triangle": lambda c, op: self.shapes.draw_triangle_filled(
                c, *_points(self._arity(op, 6)), self._value(c, op)),
            "polygon": lambda c, op: self.shapes.draw_polygon_outline(c, self._polygon(op), self._value(c, op)),
            "fill-polygon": lambda c, op: self.shapes.draw_polygon_filled(c, self._polygon(op), self._value(c, op)),
        }

    def _circle(self, canvas: Canvas, op: Operation) -> None:
        cx, cy, radius = self._arity(op, 3)
        draw = self.raster.draw_circle_filled if op.name == "fill-circle" else self.raster.draw_circle_outline
        draw(canvas, Point(cx, cy), radius, self._value(canvas, op))

    def _rect(self, canvas: Canvas, op: Operation) -> None:
        x, y, width, height = self._arity(op, 4)
        self.raster.draw_rectangle_filled(canvas, Point(x, y), width, height, self._value(canvas, op))

    @staticmethod
    def _polygon(op: Operation) -> List[Point]:
        if len(op.args) % 2:
            raise OperationSyntaxError(f"{op.name}: нечётное число координат {len(op.args)}")
        return _points(op.args)

    @staticmethod
    def _arity(op: Operation, minimum: int, maximum: Optional[int] = None) -> Tuple[int, ...]:
        maximum = minimum if maximum is None else maximum
        if not minimum <= len(op.args) <= maximum:
            raise OperationSyntaxError(
                f"{op.name}: ожидалось {minimum}..{maximum} аргументов, получено {len(op.args)}"
            )
        return op.args

    @staticmethod
    def _value(canvas: Canvas, op: Operation) -> Sample:
        """Значение рисования; по умолчанию — максимальная интенсивность (для P1 — установленный пиксель)."""
        if op.value is None:
            if canvas.kind is SampleKind.BITMAP:
                return True
            top = canvas.max_intensity
            return top if canvas.kind is SampleKind.GRAYSCALE else (top, top, top)
        if canvas.kind is SampleKind.COLOR:
            return op.value if len(op.value) == 3 else op.value * 3
        if len(op.value) != 1:
            raise OperationSyntaxError(f"{op.name}: для {canvas.magic} ожидается одно значение")
        return op.value[0]
