# どこで: `src/metascan/core/attachment.py`。
# 何を: クラス/関数へ MetadataRecord を付与し、kind ごとに読み出す付与ストアを提供する。
# なぜ: 付与は定義時に 1 回だけ行い、以降は不変タプルとして読むだけにするため。

from __future__ import annotations

import inspect
from typing import Any

from .kind import TARGET_OPERATION, TARGET_TYPE, KindSchema, MetadataRecord

_RECORDS_ATTR = "__metascan_records__"


def unwrap(member: Any) -> Any:
    """staticmethod/classmethod を中身の関数へ剥がして返す。"""

    if isinstance(member, (staticmethod, classmethod)):
        return member.__func__
    return member


def element_kind(obj: Any) -> str:
    """obj が type 要素か operation 要素かを返す。

    Raises
    ------
    TypeError
        クラスでも関数でもない場合。
    """

    target = unwrap(obj)
    if inspect.isclass(target):
        return TARGET_TYPE
    if inspect.isfunction(target):
        return TARGET_OPERATION
    raise TypeError(f"メタデータはクラスか関数にしか付与できない: got={obj!r}")


def own_records(obj: Any) -> tuple[MetadataRecord, ...]:
    """obj 自身に付与されたレコードを付与の宣言順で返す（継承分は含めない）。"""

    target = unwrap(obj)
    namespace = getattr(target, "__dict__", None)
    if namespace is None:
        return ()
    return tuple(namespace.get(_RECORDS_ATTR, ()))


def attach(obj: Any, record: MetadataRecord) -> None:
    """obj にレコードを 1 件付与する（デコレータ実装の内部からのみ呼ぶ）。

    Raises
    ------
    TypeError
        kind がこの要素種別を許可していない場合。
    ValueError
        repeatable でない kind を同じ要素へ 2 回付与した場合。
    """

    target = unwrap(obj)
    element = element_kind(target)
    schema = record.schema
    if not schema.allows(element):
        raise TypeError(
            f"kind '{schema.name}' は {element} には付与できない"
            f"（許可: {', '.join(sorted(schema.targets))}）"
        )

    existing = own_records(target)
    if not schema.repeatable and any(r.kind == schema.name for r in existing):
        name = getattr(target, "__qualname__", repr(target))
        raise ValueError(f"kind '{schema.name}' は repeatable でないため {name} へ 2 回付与できない")

    # デコレータは下から適用されるので、先頭へ積むとソース上の宣言順になる。
    setattr(target, _RECORDS_ATTR, (record, *existing))


def read_records(obj: Any, schema: KindSchema) -> tuple[MetadataRecord, ...]:
    """obj に付いている schema の kind のレコードを宣言順で返す。"""

    target = unwrap(obj)
    if schema.reader is not None:
        return tuple(schema.reader(target, schema))

    if schema.inherited and inspect.isclass(target):
        for base in target.__mro__:
            found = tuple(r for r in own_records(base) if r.kind == schema.name)
            if found:
                return found
        return ()

    return tuple(r for r in own_records(target) if r.kind == schema.name)


__all__ = ["attach", "element_kind", "own_records", "read_records", "unwrap"]
