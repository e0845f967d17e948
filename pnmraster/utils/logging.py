"""Логирование пакета: один корневой логгер `pnmraster` и дочерние логгеры модулей.

Принципы:
- Обработчик ставится один раз, при первом обращении; повторные вызовы его не дублируют.
- Уровень берётся из `PNMRASTER_LOG_LEVEL` (по умолчанию INFO), CLI может
  переопределить его через `set_level`.
- Сообщения не уходят в глобальный корневой логгер.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

ROOT_LOGGER_NAME = "pnmraster"
LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"
ENV_LEVEL = "PNMRASTER_LOG_LEVEL"

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def resolve_level(value: Optional[str]) -> int:
    """Имя уровня без учёта регистра; неизвестное или пустое даёт INFO."""
    name = (value or "").strip().upper()
    return getattr(logging, name) if name in _LEVELS else logging.INFO


def _root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
        root.addHandler(handler)
        root.propagate = False
        _apply_level(root, resolve_level(os.getenv(ENV_LEVEL)))
    return root


def _apply_level(root: logging.Logger, level: int) -> None:
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)


def set_level(value: Optional[str]) -> None:
    _apply_level(_root(), resolve_level(value))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Логгер модуля: `pnmraster.services.x` становится дочерним `services.x`."""
    root = _root()
    if not name or name == ROOT_LOGGER_NAME:
        return root
    return root.getChild(name.removeprefix(ROOT_LOGGER_NAME + "."))
