"""Parâmetros padrão de cada variante do solver.

O módulo centraliza os *defaults* usados pela CLI e pelos testes (número de
cidades do layout aleatório, tamanho da população, iterações, tamanho mínimo
de rota e número de vendedores), evitando a duplicação dos mesmos números
mágicos. Os valores podem ser sobrescritos via ``merge_defaults``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from mtsp_ga.optimization.ga.layout import VARIANTS
from mtsp_ga.optimization.ga.errors import ConfigurationError

__all__ = [
    "VariantDefaults",
    "DEFAULT_VARIANT",
    "VARIANT_DEFAULTS",
    "defaults_for",
    "merge_defaults",
]


@dataclass(frozen=True, slots=True)
class VariantDefaults:
    """Container simples para os hiperparâmetros de uma variante."""

    cities: int = 50
    pop_size: int = 100
    num_iter: int = 10_000
    min_tour: int = 1
    salesmen: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "cities": self.cities,
            "pop_size": self.pop_size,
            "num_iter": self.num_iter,
            "min_tour": self.min_tour,
            "salesmen": self.salesmen,
        }


DEFAULT_VARIANT = "fixed_start"

VARIANT_DEFAULTS: dict[str, VariantDefaults] = {
    "open": VariantDefaults(),
    "fixed_start": VariantDefaults(),
    "multi_variable": VariantDefaults(cities=40, pop_size=80, num_iter=5_000, min_tour=3),
    "multi_depot": VariantDefaults(
        cities=40, pop_size=160, num_iter=5_000, min_tour=2, salesmen=5
    ),
}


def defaults_for(variant: str) -> VariantDefaults:
    """Return the defaults registered for ``variant``."""

    key = str(variant).lower()
    try:
        return VARIANT_DEFAULTS[key]
    except KeyError:
        raise ConfigurationError(
            f"unknown variant '{variant}', expected one of {VARIANTS}"
        ) from None


def merge_defaults(
    variant: str,
    overrides: Mapping[str, Any] | None = None,
) -> VariantDefaults:
    """Merge ``overrides`` with the defaults of ``variant``.

    Parameters
    ----------
    variant:
        Nome da variante (ver :data:`~mtsp_ga.optimization.ga.layout.VARIANTS`).
    overrides:
        Valores a substituir. Entradas ``None`` são ignoradas; chaves
        desconhecidas geram ``KeyError`` para evitar erros silenciosos.
    """

    data = defaults_for(variant).to_dict()
    if not overrides:
        return VariantDefaults(**data)

    unknown = sorted(set(overrides) - set(data))
    if unknown:
        raise KeyError(f"Unknown parameter(s): {', '.join(unknown)}")

    data.update({key: value for key, value in overrides.items() if value is not None})
    return VariantDefaults(**data)
