"""Настройки растрового движка и консольного драйвера."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class RasterSettings:
    """Параметры рисования.

    Fields:
        sort_intersections: сортировать пересечения строки с рёбрами перед
            разбиением на пары при заливке многоугольника. `False` включает
            исторический порядок обнаружения: пара с началом правее конца
            ничего не рисует.
        fill_circle_caps: при заливке круга дополнительно рисовать зеркальные
            отрезки `center.x ± y` в строках `center.y ± x`, закрывающие
            верхний и нижний сегменты. По умолчанию выключено.
    """
    sort_intersections: bool = True
    fill_circle_caps: bool = False


@dataclass
class CliSettings:
    """Параметры запуска из командной строки."""
    log_level: str = "INFO"
    preview_path: Optional[Path] = None
    comment: Optional[str] = None
    raster: RasterSettings = field(default_factory=RasterSettings)
