"""
Base exceptions for the Scaffold template engine.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from ScaffoldUserError.

Broken internal invariants (see TemplateCloneError) should NOT inherit
from ScaffoldUserError — they propagate with full tracebacks.
"""

from __future__ import annotations


class ScaffoldUserError(Exception):
    """
    Base class for all user-facing errors in Scaffold.

    These errors indicate problems that the user can fix:
    configuration issues, unreadable data files, bad CLI arguments, etc.
    """
    pass


class ConfigError(ScaffoldUserError):
    """Ошибка загрузки конфигурации движка (scaffold.yaml / переменные окружения)."""
    pass


class InlineVarsError(ValueError):
    """Некорректный список аргументов вида key:"value", ... внутри тега."""

    def __init__(self, message: str, text: str, position: int):
        super().__init__(f"{message} at {position}: {text!r}")
        self.text = text
        self.position = position


class TemplateCloneError(RuntimeError):
    """
    Элемент разобранного шаблона не удалось скопировать перед рендерингом.

    Означает нарушение внутреннего инварианта (в последовательности оказался
    не-Element или полезная нагрузка не строковая). Рендер прерывается.
    """
    pass


__all__ = ["ScaffoldUserError", "ConfigError", "InlineVarsError", "TemplateCloneError"]
