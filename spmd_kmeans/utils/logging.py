import logging
from typing import Any


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """
    Создаёт и настраивает корневой логгер проекта ``spmd_kmeans``.

    Вызывается в каждом процессе-воркере: обработчик добавляется один раз
    на процесс, вывод идёт в stderr.

    :param level: минимальный уровень логирования
    :return: настроенный экземпляр :class:`logging.Logger`
    """
    logger = logging.getLogger("spmd_kmeans")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Чтобы сообщения не дублировались через root-логгер
    logger.propagate = False

    return logger


def format_rank_prefix(rank: int, size: int) -> str:
    """Текстовый префикс для логов воркера: ``[rank r/W]``."""
    return f"[rank {rank}/{size}]"


class RankLogger:
    """Обёртка над логгером, добавляющая префикс ранга к каждому сообщению."""

    def __init__(self, base_logger: logging.Logger | None, rank: int, size: int) -> None:
        self._base = base_logger
        self._prefix = format_rank_prefix(rank, size)

    def isEnabledFor(self, level: int) -> bool:
        return self._base is not None and self._base.isEnabledFor(level)

    def _log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._base:
            self._base.log(level, f"{self._prefix} {msg}", *args, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, *args, **kwargs)
