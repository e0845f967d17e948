"""Чтение и запись текстовых форматов Netpbm (P1, P2, P3).

Принципы:
- SRP: только разбор и сериализация; холст приходит и уходит готовым.
- Заголовок и данные разбираются как единый поток токенов, разделённых
  пробельными символами; `#` начинает комментарий до конца строки.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional

import numpy as np

from pnmraster.models.canvas import MAX_SUPPORTED_INTENSITY, Canvas, SampleKind
from pnmraster.models.errors import NetpbmFormatError
from pnmraster.utils.logging import get_logger

logger = get_logger(__name__)


def tokenize(text: str) -> Iterator[str]:
    """Токены документа без комментариев."""
    for line in text.splitlines():
        content = line.split("#", 1)[0]
        yield from content.split()


class NetpbmService:
    def loads(self, text: str) -> Canvas:
        """Разбирает документ P1/P2/P3 и возвращает холст.

        Raises:
            NetpbmFormatError: неизвестное магическое число, некорректные
                размеры или максимум, нехватка/избыток отсчётов, значения вне диапазона.
        """
        tokens = tokenize(text)
        magic = next(tokens, None)
        if magic is None:
            raise NetpbmFormatError("Пустой документ")
        try:
            kind = SampleKind.from_magic(magic)
        except ValueError as exc:
            raise NetpbmFormatError(f"Формат не поддерживается: {magic}") from exc

        width = self._read_int(tokens, "ширина")
        height = self._read_int(tokens, "высота")
        if width <= 0 or height <= 0:
            raise NetpbmFormatError(f"Размеры изображения должны быть положительными: {width}x{height}")

        max_intensity: Optional[int] = None
        limit = 1
        if kind.has_intensity:
            max_intensity = self._read_int(tokens, "максимальное значение")
            if not 1 <= max_intensity <= MAX_SUPPORTED_INTENSITY:
                raise NetpbmFormatError(
                    f"Максимальное значение должно быть в 1..{MAX_SUPPORTED_INTENSITY}: {max_intensity}"
                )
            limit = max_intensity

        expected = width * height * kind.channel_depth
        values: List[int] = []
        for token in tokens:
            # В P1 биты могут идти без разделителей: "010".
            for part in (token if kind is SampleKind.BITMAP else (token,)):
                if len(values) == expected:
                    raise NetpbmFormatError(f"Лишние данные после {expected} отсчётов: {token!r}")
                value = self._parse_int(part, "отсчёт")
                if not 0 <= value <= limit:
                    raise NetpbmFormatError(f"Отсчёт {part} вне диапазона [0, {limit}]")
                values.append(value)
        if len(values) < expected:
            raise NetpbmFormatError(f"Недостаточно отсчётов: ожидалось {expected}, найдено {len(values)}")

        shape = (height, width, 3) if kind is SampleKind.COLOR else (height, width)
        pixels = np.array(values, dtype=np.uint8).reshape(shape)
        if kind is SampleKind.BITMAP:
            pixels = pixels.astype(bool)
        canvas = Canvas.from_array(pixels, kind, max_intensity)
        logger.debug("decoded %r", canvas)
        return canvas

    def dumps(self, canvas: Canvas, comment: Optional[str] = None) -> str:
        """Сериализует холст: заголовок и по одной текстовой строке на строку пикселей."""
        lines = [canvas.magic]
        if comment:
            lines.extend(f"# {part}" for part in comment.splitlines())
        lines.append(f"{canvas.width} {canvas.height}")
        if canvas.kind.has_intensity:
            lines.append(str(canvas.max_intensity))

        pixels = canvas.pixels.astype(np.uint8)
        for row in pixels:
            lines.append(" ".join(str(int(v)) for v in row.ravel()))
        return "\n".join(lines) + "\n"

    def load(self, file_path: str | Path) -> Canvas:
        """Загружает холст из файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            NetpbmFormatError: если содержимое не является текстовым Netpbm.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise NetpbmFormatError(f"Файл не является текстовым Netpbm: {path}") from exc
        canvas = self.loads(text)
        logger.info("Загружено %s: %r", path, canvas)
        return canvas

    def save(self, canvas: Canvas, file_path: str | Path, comment: Optional[str] = None) -> Path:
        """Сохраняет холст в файл и возвращает путь."""
        path = Path(file_path)
        path.write_text(self.dumps(canvas, comment), encoding="utf-8")
        logger.info("Сохранено %s: %r", path, canvas)
        return path

    # ---------- Вспомогательные функции ----------
    def _read_int(self, tokens: Iterator[str], what: str) -> int:
        token = next(tokens, None)
        if token is None:
            raise NetpbmFormatError(f"Заголовок оборван: отсутствует {what}")
        return self._parse_int(token, what)

    @staticmethod
    def _parse_int(token: str, what: str) -> int:
        try:
            return int(token)
        except ValueError as exc:
            raise NetpbmFormatError(f"Некорректное значение ({what}): {token!r}") from exc
