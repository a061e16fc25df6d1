"""Constantes centrais utilizadas em múltiplos módulos.

Centraliza os valores numéricos do solver (escala do layout aleatório,
cadência de progresso) e nomes de arquivos recorrentes, evitando literais
mágicos espalhados pelo projeto.
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "DEFAULT_LAYOUT_SCALE",
    "DEFAULT_PROGRESS_NOTIFICATIONS",
    "LOG_FILE_NAME",
    "progress_interval",
    "round_population_size",
]


DEFAULT_LAYOUT_SCALE: Final[float] = 10.0
"""Lado do quadrado onde cidades aleatórias são sorteadas."""

DEFAULT_PROGRESS_NOTIFICATIONS: Final[int] = 100
"""Número aproximado de notificações de progresso por execução."""

LOG_FILE_NAME: Final[str] = "mtsp_ga.log"


def progress_interval(num_iter: int, notifications: int = DEFAULT_PROGRESS_NOTIFICATIONS) -> int:
    """Iterations between two progress notifications."""

    if num_iter <= 0:
        raise ValueError("num_iter must be positive")
    notifications = max(1, int(notifications))
    return max(1, -(-int(num_iter) // notifications))


def round_population_size(pop_size: int, group_size: int) -> int:
    """Smallest positive multiple of ``group_size`` not below ``pop_size``."""

    if group_size <= 0:
        raise ValueError("group_size must be positive")
    return max(group_size, group_size * -(-int(pop_size) // group_size))
