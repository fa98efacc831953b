# どこで: `src/metascan/core/builtin_kinds.py`。
# 何を: 標準ライブラリのマーカー（typing.override / warnings.deprecated）を読む組み込み kind を登録する。
# なぜ: ツール向けマーカーもユーザー定義 kind と同じ scan 経路で列挙できるようにするため。

from __future__ import annotations

import inspect
from typing import Any

from .kind import TARGET_OPERATION, TARGET_TYPE, FieldSpec, KindSchema, MetadataRecord
from .kind_registry import kind_registry


def _read_override(target: Any, schema: KindSchema) -> tuple[MetadataRecord, ...]:
    # typing.override は関数に __override__ = True を立てる（PEP 698）。
    if getattr(target, "__override__", False) is True:
        return (schema.make_record({}),)
    return ()


def _read_deprecated(target: Any, schema: KindSchema) -> tuple[MetadataRecord, ...]:
    # warnings.deprecated は __deprecated__ にメッセージを置く（PEP 702）。
    # クラスでは継承で見えてしまうので自身の名前空間だけを見る。
    if inspect.isclass(target):
        message = vars(target).get("__deprecated__")
    else:
        message = getattr(target, "__deprecated__", None)
    if message is None:
        return ()
    return (schema.make_record({"message": str(message)}),)


OVERRIDE = KindSchema(
    name="override",
    targets=frozenset({TARGET_OPERATION}),
    reader=_read_override,
)

DEPRECATED = KindSchema(
    name="deprecated",
    fields=(FieldSpec(name="message", type=str),),
    targets=frozenset({TARGET_TYPE, TARGET_OPERATION}),
    reader=_read_deprecated,
)

BUILTIN_KINDS: tuple[KindSchema, ...] = (OVERRIDE, DEPRECATED)

for _schema in BUILTIN_KINDS:
    if _schema.name not in kind_registry:
        kind_registry._register(_schema)


__all__ = ["BUILTIN_KINDS", "DEPRECATED", "OVERRIDE"]
