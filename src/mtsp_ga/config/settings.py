"""Process-wide settings for the CLI and the solver runner.

Values are layered, lowest precedence first: built-in defaults, a ``.env``
file (explicit, or ``<project_root>/.env``), ``MTSP_GA_*`` environment
variables and explicit overrides.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Mapping

__all__ = [
    "ENV_PREFIX",
    "Settings",
    "get_settings",
    "load_env_file",
    "reset_settings_cache",
]


ENV_PREFIX = "MTSP_GA_"

# name -> (type, default); paths are relative to the project root
_FIELDS: dict[str, tuple[type, Any]] = {
    "CONFIGS_DIR": (Path, "configs"),
    "OUTPUTS_DIR": (Path, "outputs"),
    "LOGS_DIR": (Path, "logs"),
    "ENVIRONMENT": (str, "development"),
    "RANDOM_SEED": (int, 42),
    "STRUCTURED_LOGGING": (bool, False),
}

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})


def _to_bool(raw: str) -> bool:
    token = raw.strip().lower()
    if token in _TRUTHY or token in _FALSY:
        return token in _TRUTHY
    raise ValueError(f"Cannot interpret '{raw}' as boolean")


def _convert(value: Any, kind: type, root: Path) -> Any:
    if kind is Path:
        path = Path(str(value)).expanduser()
        return path if path.is_absolute() else root / path
    if kind is bool and isinstance(value, str):
        return _to_bool(value)
    return kind(value)


def load_env_file(path: Path) -> dict[str, str]:
    """Read ``KEY=VALUE`` lines; comments, blanks and lines without ``=`` are skipped."""

    if not path.exists():
        return {}
    entries: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.strip().partition("=")
        if sep and key and not key.startswith("#"):
            entries[key.strip()] = value.strip()
    return entries


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


@dataclass(slots=True, frozen=True)
class Settings:
    """Immutable settings: directories, default seed and log format.

    ``outputs_dir`` receives the files written by ``mtsp-ga solve --output``.
    """

    project_root: Path
    configs_dir: Path
    outputs_dir: Path
    logs_dir: Path
    environment: str
    random_seed: int
    structured_logging: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            key: str(value) if isinstance(value, Path) else value
            for key, value in asdict(self).items()
        }

    @classmethod
    def from_env(
        cls,
        *,
        overrides: Mapping[str, Any] | None = None,
        env_file: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "Settings":
        pending = dict(overrides or {})
        environ = os.environ if environ is None else environ
        explicit_env = load_env_file(Path(env_file).expanduser()) if env_file is not None else {}

        root_key = f"{ENV_PREFIX}PROJECT_ROOT"
        root_value = pending.pop("project_root", None)
        if root_value is None:
            root_value = environ.get(root_key, explicit_env.get(root_key))
        root = _project_root() if root_value is None else Path(str(root_value)).expanduser().resolve()

        layered = dict(explicit_env) if env_file is not None else load_env_file(root / ".env")
        layered.update(environ)

        values: dict[str, Any] = {}
        for name, (kind, default) in _FIELDS.items():
            if name in pending:
                raw = pending.pop(name)
            else:
                raw = layered.get(f"{ENV_PREFIX}{name}", default)
            values[name.lower()] = _convert(raw, kind, root)

        if pending:
            raise KeyError(f"Unknown override(s): {', '.join(sorted(pending))}")
        return cls(project_root=root, **values)


_cached: Settings | None = None


def get_settings(**kwargs: Any) -> Settings:
    """Cached :class:`Settings`; keyword arguments build a fresh, uncached instance."""

    global _cached
    if kwargs:
        return Settings.from_env(**kwargs)
    if _cached is None:
        _cached = Settings.from_env()
    return _cached


def reset_settings_cache() -> None:
    global _cached
    _cached = None
