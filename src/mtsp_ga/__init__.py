"""
Pacote mtsp_ga: algoritmo genético para roteamento de um ou vários vendedores.

Resolve variantes abertas do problema do caixeiro-viajante (início livre ou
fixo, número variável de vendedores, depósitos por vendedor) sobre uma matriz
de distâncias arbitrária. As funções de alto nível são expostas aqui para
facilitar o consumo como biblioteca.
"""

__version__ = "0.1.0"

from mtsp_ga.optimization.ga import (
    DistanceOracle,
    GeneticRun,
    RouteLayout,
    layout_for_variant,
    run_genetic_algorithm,
)

__all__ = [
    "DistanceOracle",
    "GeneticRun",
    "RouteLayout",
    "layout_for_variant",
    "run_genetic_algorithm",
    "__version__",
]
