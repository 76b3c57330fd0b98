from __future__ import annotations

import threading

from httpclients.errors import OperationCancelledError


class CancellationToken:
    """
    Назначение/ответственность:
        Кооперативный сигнал отмены для одного или нескольких вызовов BaseRestClient.
    Инварианты/гарантии:
        - Отмена необратима: после cancel() токен остаётся отменённым.
        - Потокобезопасен (threading.Event).
    Взаимодействия:
        Пайплайн проверяет токен перед отправкой и перед чтением тела ответа.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Бросает OperationCancelledError, если отмена уже запрошена."""
        if self._event.is_set():
            raise OperationCancelledError()


__all__ = ["CancellationToken"]
