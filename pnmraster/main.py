"""Точка входа: консольный драйвер конвейера."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pnmraster.config import CliSettings, RasterSettings
from pnmraster.controllers.pipeline_controller import OperationSyntaxError, PipelineController
from pnmraster.models.canvas import SampleKind
from pnmraster.models.errors import RasterError
from pnmraster.utils.logging import get_logger, set_level

logger = get_logger(__name__)

KINDS = {"bitmap": SampleKind.BITMAP, "grayscale": SampleKind.GRAYSCALE, "color": SampleKind.COLOR}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pnmraster",
        description="Преобразования и рисование на изображениях Netpbm (P1/P2/P3).",
    )
    parser.add_argument("input", type=Path, help="исходный файл (.pbm/.pgm/.ppm или любой формат Pillow)")
    parser.add_argument("output", type=Path, help="файл результата в текстовом Netpbm")
    parser.add_argument("--op", dest="ops", action="append", default=[], metavar="OP",
                        help="операция, например rotate, line:0,0,9,9@255,0,0; можно повторять")
    parser.add_argument("--kind", choices=sorted(KINDS), default="color",
                        help="вид холста при импорте не-Netpbm файла")
    parser.add_argument("--png", dest="preview", type=Path, default=None,
                        help="дополнительно сохранить предпросмотр через Pillow")
    parser.add_argument("--comment", default=None, help="комментарий в заголовке результата")
    parser.add_argument("--legacy-fill", action="store_true",
                        help="не сортировать пересечения при заливке многоугольника")
    parser.add_argument("--fill-circle-caps", action="store_true",
                        help="закрывать верхний и нижний сегменты залитого круга")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ERROR")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Разбирает аргументы, выполняет конвейер и возвращает код выхода."""
    args = build_parser().parse_args(argv)
    settings = CliSettings(
        log_level=args.log_level,
        preview_path=args.preview,
        comment=args.comment,
        raster=RasterSettings(
            sort_intersections=not args.legacy_fill,
            fill_circle_caps=args.fill_circle_caps,
        ),
    )
    set_level(settings.log_level)

    controller = PipelineController(settings=settings)
    try:
        canvas = controller.run(args.input, args.output, args.ops, kind=KINDS[args.kind])
    except OperationSyntaxError as exc:
        logger.error("Некорректная операция: %s", exc)
        return 2
    except (RasterError, OSError, ValueError) as exc:
        logger.error("Ошибка обработки %s: %s", args.input, exc)
        return 1

    logger.info("Готово: %s (%dx%d)", args.output, canvas.width, canvas.height)
    return 0


if __name__ == "__main__":
    sys.exit(main())
