"""
どこで: `src/metascan/export/console.py`。
何を: TypeScanReport を人が読むテキスト行へ整形し、標準出力へ書く関数を提供する。
なぜ: scan（列挙）と表示を分け、core をコンソール形式に依存させないため。
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from metascan.core.kind import MetadataRecord
from metascan.core.runtime_config import runtime_config
from metascan.core.scanner import TypeScanReport

_DEFAULT_SUFFIX = " (default)"


def _fmt_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value)


def _record_lines(
    record: MetadataRecord,
    *,
    depth: int,
    step: str,
    mark_defaults: bool,
) -> Iterator[str]:
    pad = step * depth
    yield f"{pad}@{record.kind}"
    for name, value in record.as_dict().items():
        suffix = _DEFAULT_SUFFIX if mark_defaults and record.is_default(name) else ""
        yield f"{pad}{step}{name}: {_fmt_value(value)}{suffix}"


def format_report(
    report: TypeScanReport,
    *,
    indent: int | None = None,
    mark_defaults: bool | None = None,
) -> list[str]:
    """レポートをテキスト行のリストへ変換して返す。

    型名、型レベルのレコード、operation ごとの発見結果の順に並べる。
    各レコードは `@Kind` の後に `field: value` をフィールド宣言順で 1 行ずつ出す。

    Parameters
    ----------
    indent : int or None
        1 段あたりの空白数。None なら runtime config の `render.indent`。
    mark_defaults : bool or None
        schema default 由来の値に `(default)` を付けるか。None なら runtime config。
    """

    if indent is None or mark_defaults is None:
        cfg = runtime_config()
        if indent is None:
            indent = cfg.indent
        if mark_defaults is None:
            mark_defaults = cfg.mark_defaults
    step = " " * int(indent)

    lines = [report.type_name]
    for record in report.type_records:
        lines.extend(_record_lines(record, depth=1, step=step, mark_defaults=mark_defaults))
    for finding in report.findings:
        lines.append(f"{step}{finding.operation_name}()")
        for _, records in finding.records:
            for record in records:
                lines.extend(
                    _record_lines(record, depth=2, step=step, mark_defaults=mark_defaults)
                )
    return lines


def print_report(
    report: TypeScanReport,
    *,
    indent: int | None = None,
    mark_defaults: bool | None = None,
) -> None:
    """format_report の結果を標準出力へ書く。"""

    for line in format_report(report, indent=indent, mark_defaults=mark_defaults):
        print(line)


__all__ = ["format_report", "print_report"]
