"""
Иерархия фатальных ошибок распределённого KMeans.

Любая из этих ошибок завершает вычисление целиком: ни один воркер
не продолжает работу после её возникновения.
"""

from __future__ import annotations


class KMeansFatalError(RuntimeError):
    """Базовая фатальная ошибка; exit_code — статус завершения процесса."""

    exit_code: int = 1


class PreconditionError(KMeansFatalError):
    """Нарушено стартовое условие (мало наблюдений для W или K)."""


class DatasetReadError(KMeansFatalError):
    """Не удалось прочитать файл с данными."""


class CollectiveError(KMeansFatalError):
    """Коллективная операция не завершилась у всех участников."""
