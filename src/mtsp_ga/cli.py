"""Command line interface for the project.

Commands:
- show-settings: print the resolved :class:`~mtsp_ga.config.Settings`
- solve: run the route genetic algorithm on random, coordinate or matrix input

Ctrl+C during ``solve`` stops the search at the next iteration boundary and
still prints the best solution found so far.
"""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
from pathlib import Path
from typing import Any, Iterable

from mtsp_ga.config import (
    Settings,
    SolverConfig,
    configure_logging,
    get_settings,
    load_config,
)
from mtsp_ga.optimization.ga import (
    VARIANTS,
    CancellationToken,
    Chromosome,
)

__all__ = ["build_parser", "main"]

logger = logging.getLogger("mtsp_ga.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="mtsp_ga CLI")
    parser.add_argument(
        "--structured-logs",
        dest="structured_logs",
        action="store_true",
        help="força logs estruturados em JSON",
    )
    parser.add_argument(
        "--plain-logs",
        dest="structured_logs",
        action="store_false",
        help="força logs texto simples",
    )
    parser.set_defaults(structured_logs=None)

    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser("show-settings", help="Exibe as Settings resolvidas")
    show.add_argument("--json", action="store_true", help="Formato JSON")

    solve = subparsers.add_parser("solve", help="Executa o algoritmo genético de rotas")
    solve.add_argument("--config", type=str, help="Arquivo de configuração YAML")
    solve.add_argument("--variant", choices=VARIANTS, help="Variante do problema")
    source = solve.add_mutually_exclusive_group()
    source.add_argument("--points", type=Path, help="CSV com coordenadas x,y[,z]")
    source.add_argument("--matrix", type=Path, help="CSV com a matriz de distâncias")
    source.add_argument("--cities", type=int, help="Número de cidades aleatórias")
    solve.add_argument("--salesmen", type=int, help="Número de vendedores (multi_depot)")
    solve.add_argument("--min-tour", dest="min_tour", type=int, help="Tamanho mínimo de rota")
    solve.add_argument("--pop-size", dest="pop_size", type=int, help="Tamanho da população")
    solve.add_argument("--iterations", dest="num_iter", type=int, help="Número de iterações")
    solve.add_argument("--seed", type=int, help="Seed do gerador aleatório")
    solve.add_argument("--json", action="store_true", help="Mostra resultado em JSON")
    solve.add_argument(
        "--output",
        type=Path,
        help="Grava o resultado completo em JSON (caminhos relativos vão para outputs_dir)",
    )

    return parser


def _configure_logging(structured: bool | None, settings: Settings, command: str) -> None:
    configure_logging(settings=settings, structured=structured, context={"command": command})


def _print_payload(payload: dict[str, Any], *, as_json: bool) -> None:
    if as_json:
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        for key, value in payload.items():
            print(f"{key}: {value}")


def _build_solver_config(
    args: argparse.Namespace, settings: Settings
) -> tuple[SolverConfig, Path | None]:
    from mtsp_ga.optimization.solvers import resolve_config_path

    config_path: Path | None = None
    if args.config:
        config_path = resolve_config_path(args.config, settings=settings)
        config = load_config(config_path, SolverConfig)
    else:
        config = SolverConfig()

    data = config.model_dump()
    updates = {
        "problem": {"variant": args.variant, "salesmen": args.salesmen, "min_tour": args.min_tour},
        "ga": {"pop_size": args.pop_size, "num_iter": args.num_iter, "seed": args.seed},
    }
    for section, values in updates.items():
        data[section].update({key: value for key, value in values.items() if value is not None})

    sources = {"count": args.cities, "points_file": args.points, "matrix_file": args.matrix}
    if any(value is not None for value in sources.values()):
        data["cities"] = {key: value for key, value in sources.items() if value is not None}

    return SolverConfig.model_validate(data), config_path


def _log_progress(iteration: int, best_distance: float, best: Chromosome) -> None:
    logger.info(
        "Iteration %d: best distance %.4f with %d salesmen",
        iteration,
        best_distance,
        best.agents,
    )


def _solve(args: argparse.Namespace, settings: Settings) -> dict[str, Any]:
    from mtsp_ga.optimization.solvers import run_solver, save_result

    config, config_path = _build_solver_config(args, settings)
    token = CancellationToken()

    def _interrupt(signum: int, frame: Any) -> None:
        logger.warning("Interrupt received; stopping after the current iteration")
        token.cancel()

    previous = signal.signal(signal.SIGINT, _interrupt)
    try:
        result = run_solver(
            config,
            config_path=config_path,
            settings=settings,
            cancel=token,
            progress=_log_progress,
        )
    finally:
        signal.signal(signal.SIGINT, previous)

    payload = result.to_dict(include_history=args.json)
    if args.output is not None:
        payload["output"] = str(save_result(result, args.output, settings=settings))
    return payload


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    settings = get_settings()
    _configure_logging(args.structured_logs, settings, args.command)

    try:
        if args.command == "show-settings":
            _print_payload(settings.to_dict(), as_json=args.json)
        elif args.command == "solve":
            _print_payload(_solve(args, settings), as_json=args.json)
        else:  # pragma: no cover - argparse restricts the choices
            parser.error(f"Unknown command: {args.command}")

    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
