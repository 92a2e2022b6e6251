"""
Конфигурация движка Scaffold.

Источники в порядке приоритета: переменные окружения, файл scaffold.yaml
в корне шаблонов, значения по умолчанию.

    root: templates            # корень шаблонов (относительно файла конфигурации)
    encoding: utf-8
    cache: true
    default_data:
      site-name: "My site"
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError
from .template.cache import TemplateCache
from .template.loader import FileSystemLoader

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")

CONFIG_FILE = "scaffold.yaml"
ENV_CACHE = "SCAFFOLD_CACHE"
ENV_ROOT = "SCAFFOLD_ROOT"


def _norm_bool(x: object) -> bool:
    if isinstance(x, bool):
        return x
    if x is None:
        return False
    s = str(x).strip().lower()
    return s not in {"0", "false", "no", "off", ""}


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    if not path.is_file():
        return {}
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


@dataclass
class ScaffoldConfig:
    root: Path = field(default_factory=Path.cwd)
    encoding: str = "utf-8"
    cache: bool = True
    default_data: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict, *, base: Path) -> ScaffoldConfig:
        """Строит конфигурацию из словаря; относительный root считается от base."""
        root = data.get("root")
        if root is None:
            root_path = base
        elif isinstance(root, str):
            root_path = Path(root)
            if not root_path.is_absolute():
                root_path = base / root_path
        else:
            raise ConfigError(f"'root' must be a string, got {type(root).__name__}")

        encoding = data.get("encoding", "utf-8")
        if not isinstance(encoding, str) or not encoding:
            raise ConfigError("'encoding' must be a non-empty string")

        default_data = data.get("default_data") or {}
        if not isinstance(default_data, dict):
            raise ConfigError("'default_data' must be a mapping")

        return cls(
            root=root_path,
            encoding=encoding,
            cache=_norm_bool(data.get("cache", True)),
            default_data={str(k): "" if v is None else str(v) for k, v in default_data.items()},
        )

    @classmethod
    def load(cls, base: Optional[Path] = None) -> ScaffoldConfig:
        """
        Загружает конфигурацию для каталога base (по умолчанию CWD).

        Raises:
            ConfigError: При некорректном scaffold.yaml
        """
        if base is None:
            base = Path.cwd()

        cfg_path = base / CONFIG_FILE
        raw = _read_yaml_map(cfg_path)
        if raw:
            logger.debug(f"Loaded config from {cfg_path}")
        cfg = cls.from_dict(raw, base=base)

        env_cache = os.environ.get(ENV_CACHE, None)
        if env_cache is not None:
            cfg.cache = _norm_bool(env_cache)
        env_root = os.environ.get(ENV_ROOT)
        if env_root:
            cfg.root = Path(env_root)
        return cfg

    def create_loader(self) -> FileSystemLoader:
        return FileSystemLoader(self.root, encoding=self.encoding)

    def create_cache(self) -> Optional[TemplateCache]:
        return TemplateCache() if self.cache else None


__all__ = ["ScaffoldConfig", "CONFIG_FILE", "ENV_CACHE", "ENV_ROOT"]
