from __future__ import annotations

from importlib import metadata

# Имя дистрибутива в pyproject.toml; "scaffold" — на случай локальной сборки под коротким именем
_DISTRIBUTIONS = ("scaffold-templates", "scaffold")


def tool_version() -> str:
    """Версия установленного Scaffold для `scaffold -v`; "0.0.0" при запуске из исходников."""
    for dist in _DISTRIBUTIONS:
        try:
            return metadata.version(dist)
        except metadata.PackageNotFoundError:
            continue
    return "0.0.0"


__all__ = ["tool_version"]
