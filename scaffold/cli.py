from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .binder import bind, iter_fields, scalar_value
from .config import ScaffoldConfig
from .engine import ScaffoldEngine
from .errors import ScaffoldUserError
from .report import build_inspect_report
from .version import tool_version

_LOG = logging.getLogger("scaffold")
_yaml = YAML(typ="safe")


def _setup_logging(debug: bool) -> None:
    level = logging.DEBUG if debug or os.environ.get("SCAFFOLD_DEBUG") else logging.WARNING
    _LOG.setLevel(level)
    if not _LOG.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        _LOG.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="scaffold",
        description="Scaffold template engine",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--debug", action="store_true", help="подробный лог в stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Общие аргументы для всех подкоманд
    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("path", help="путь к шаблону относительно корня (например /views/home.html)")
        sp.add_argument("--section", default="", help="имя секции {{name}} ... {{/name}} внутри файла")
        sp.add_argument("--root", help="корень шаблонов (по умолчанию CWD или SCAFFOLD_ROOT)")

    def add_data(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--data", metavar="FILE", help="YAML/JSON файл с данными (отображение ключ → значение)")
        sp.add_argument("--set", action="append", metavar="KEY=VALUE", help="значение переменной (можно указать несколько)")
        sp.add_argument("--show", action="append", metavar="BLOCK", help="показать блок (можно указать несколько)")

    sp_render = sub.add_parser("render", help="отрендерить шаблон в stdout")
    add_common(sp_render)
    add_data(sp_render)

    sp_get = sub.add_parser("get", help="содержимое блока без полного рендеринга")
    add_common(sp_get)
    sp_get.add_argument("block", help="имя блока")
    add_data(sp_get)

    sp_inspect = sub.add_parser("inspect", help="JSON-отчёт: элементы, индекс полей, включения")
    add_common(sp_inspect)

    return p


def _parse_sets(items: Optional[List[str]]) -> Dict[str, str]:
    """Парсит список 'key=value' в словарь."""
    result: Dict[str, str] = {}
    for item in items or []:
        if "=" not in item:
            raise ScaffoldUserError(f"Invalid --set format '{item}'. Expected 'key=value'")
        key, value = item.split("=", 1)
        result[key.strip()] = value
    return result


def _load_data_file(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    file_path = Path(path)
    if not file_path.is_file():
        raise ScaffoldUserError(f"Data file not found: {file_path}")
    try:
        raw = _yaml.load(file_path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ScaffoldUserError(f"Invalid data file {file_path}: {e}") from e
    if not isinstance(raw, dict):
        raise ScaffoldUserError(f"Data file must contain a mapping: {file_path}")
    return raw


def _apply_data(page, data: Mapping[str, Any]) -> None:
    """
    Записывает содержимое файла данных в шаблон.

    Ключи верхнего уровня сохраняются как есть (допускаются "card-title"),
    вложенные отображения разворачиваются в ключи через точку: user.name.
    Списки не поддерживаются.
    """
    for key, value in data.items():
        key = str(key)
        if iter_fields(value) is not None:
            bind(page.data, value, key)
            continue
        scalar = scalar_value(value)
        if scalar is None and value is not None:
            raise ScaffoldUserError(
                f"Unsupported value for '{key}' in data file: {type(value).__name__}"
            )
        page[key] = scalar


def _engine(ns: argparse.Namespace) -> ScaffoldEngine:
    cfg = ScaffoldConfig.load()
    if ns.root:
        cfg.root = Path(ns.root)
    return ScaffoldEngine.from_config(cfg)


def _page(ns: argparse.Namespace):
    page = _engine(ns).template(ns.path, ns.section)
    _apply_data(page, _load_data_file(ns.data))
    page.update(_parse_sets(ns.set))
    for block in ns.show or []:
        page.show(block)
    return page


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.debug)

    try:
        if ns.cmd == "render":
            sys.stdout.write(_page(ns).render())
            return 0

        if ns.cmd == "get":
            sys.stdout.write(_page(ns).get(ns.block))
            return 0

        if ns.cmd == "inspect":
            page = _engine(ns).template(ns.path, ns.section)
            report = build_inspect_report(ns.path, ns.section, page.parsed)
            sys.stdout.write(json.dumps(report.model_dump(mode="json"), ensure_ascii=False, indent=2))
            return 0

    except ScaffoldUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
