# どこで: `src/metascan/core/scanner.py`。
# 何を: 型の宣言済み operation を順に走査し、指定 kind のメタデータを TypeScanReport にまとめる。
# なぜ: 「型 -> operation 列 -> kind ごとのレコード列」という列挙を 1 箇所に閉じ、描画と分離するため。

from __future__ import annotations

import importlib
import inspect
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from . import builtin_kinds as _builtin_kinds  # noqa: F401
from .attachment import read_records, unwrap
from .errors import NotFoundError
from .kind import TARGET_OPERATION, TARGET_TYPE, KindSchema, MetadataRecord
from .kind_registry import MetadataKind, kind_registry

_logger = logging.getLogger(__name__)

KindRef = MetadataKind | KindSchema | str

# 注釈を持つクラス本体にインタプリタが生成する関数。宣言された operation ではない。
_GENERATED_MEMBERS = frozenset({"__annotate__", "__annotate_func__"})

# warnings.deprecated がクラスへ差し込む警告用フック。
_DEPRECATED_CLASS_HOOKS = frozenset({"__new__", "__init_subclass__"})


def _is_deprecated_class_hook(cls: type, name: str, func: Any) -> bool:
    if name not in _DEPRECATED_CLASS_HOOKS:
        return False
    message = vars(cls).get("__deprecated__")
    if message is None:
        return False
    return getattr(func, "__deprecated__", None) == message and hasattr(func, "__wrapped__")


def _declared_original(cls: type, hook: Any) -> Callable[..., Any] | None:
    """フックが包んだ元関数がクラス本体で宣言されたものならそれを返す。"""

    original = hook.__wrapped__
    # 元の __init_subclass__ は束縛済みメソッドとして包まれる。
    original = getattr(original, "__func__", original)
    if inspect.isfunction(original) and original.__qualname__.startswith(f"{cls.__qualname__}."):
        return original
    return None


@dataclass(frozen=True, slots=True)
class OperationDescriptor:
    """型が宣言する名前付き operation（メソッド）。"""

    name: str
    func: Callable[..., Any]

    def attached_metadata(self, kind: KindSchema) -> tuple[MetadataRecord, ...]:
        return read_records(self.func, kind)


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """scan 対象のクラスへのハンドル。"""

    cls: type

    @property
    def name(self) -> str:
        return self.cls.__name__

    def declared_operations(self) -> tuple[OperationDescriptor, ...]:
        """クラス本体で宣言された operation を宣言順で返す。

        Notes
        -----
        `vars(cls)` の挿入順（= クラス本体での定義順）を使う。
        通常関数 / staticmethod / classmethod を operation とみなし、
        property や値属性、継承メンバは含めない。
        """

        out: list[OperationDescriptor] = []
        for name, member in vars(self.cls).items():
            if name in _GENERATED_MEMBERS:
                continue
            func = unwrap(member)
            if _is_deprecated_class_hook(self.cls, name, func):
                func = _declared_original(self.cls, func)
                if func is None:
                    continue
            if inspect.isfunction(func):
                out.append(OperationDescriptor(name=name, func=func))
        return tuple(out)

    def attached_metadata(self, kind: KindSchema) -> tuple[MetadataRecord, ...]:
        return read_records(self.cls, kind)


@dataclass(frozen=True, slots=True)
class OperationFinding:
    """1 operation ぶんの発見結果。records は (kind 名, レコード列) の列。"""

    operation_name: str
    records: tuple[tuple[str, tuple[MetadataRecord, ...]], ...]

    def get(self, kind: str) -> tuple[MetadataRecord, ...]:
        """kind 名のレコード列を返す。無ければ空タプル。"""
        for name, records in self.records:
            if name == kind:
                return records
        return ()

    def kinds(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.records)


@dataclass(frozen=True, slots=True)
class TypeScanReport:
    """scan_type の結果。findings は operation の宣言順。"""

    type_name: str
    type_records: tuple[MetadataRecord, ...]
    findings: tuple[OperationFinding, ...]

    @property
    def type_level_record(self) -> MetadataRecord | None:
        """型に付いた最初のレコード（kind の登録順）。無ければ None。"""
        return self.type_records[0] if self.type_records else None

    def finding(self, operation_name: str) -> OperationFinding | None:
        for item in self.findings:
            if item.operation_name == operation_name:
                return item
        return None


def _import_object(path: str) -> Any:
    """`"pkg.mod:Qual.Name"` または `"pkg.mod.Name"` を import して返す。"""

    if ":" in path:
        module_name, _, qualname = path.partition(":")
        candidates = [(module_name, qualname)]
    else:
        parts = path.split(".")
        candidates = [
            (".".join(parts[:i]), ".".join(parts[i:])) for i in range(len(parts) - 1, 0, -1)
        ]

    for module_name, qualname in candidates:
        # 相対 import 形式は基準パッケージが無いので解決できない。
        if not module_name or not qualname or module_name.startswith("."):
            continue
        try:
            obj: Any = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # 指定モジュール自身が無い場合だけ次の候補へ進む。依存先の欠落は伝播させる。
            missing = exc.name or ""
            if module_name == missing or module_name.startswith(f"{missing}."):
                continue
            raise
        try:
            for attr in qualname.split("."):
                obj = getattr(obj, attr)
        except AttributeError:
            continue
        return obj
    raise NotFoundError(f"型を解決できない: {path!r}")


def resolve_type(target: type | str | None) -> TypeDescriptor:
    """scan 対象をクラスへ解決して TypeDescriptor を返す。

    Raises
    ------
    NotFoundError
        None / クラスでない値 / import できないパスが渡された場合。
    """

    if target is None:
        raise NotFoundError("scan 対象の型が None")
    obj = _import_object(target) if isinstance(target, str) else target
    if not inspect.isclass(obj):
        raise NotFoundError(f"scan 対象がクラスではない: got={target!r}")
    return TypeDescriptor(cls=obj)


def resolve_kinds(recognized_kinds: Iterable[KindRef]) -> tuple[KindSchema, ...]:
    """kind 指定を登録済み KindSchema 列へ解決し、登録順に並べて返す。

    Raises
    ------
    NotFoundError
        未登録の kind が含まれる場合。
    """

    if isinstance(recognized_kinds, (str, MetadataKind, KindSchema)):
        recognized_kinds = (recognized_kinds,)
    schemas: dict[str, KindSchema] = {}
    for kind in recognized_kinds:
        schema = kind_registry.resolve(kind)
        schemas[schema.name] = schema
    return tuple(sorted(schemas.values(), key=lambda s: kind_registry.order_of(s.name)))


def scan_type(
    target: type | str | None,
    recognized_kinds: Iterable[KindRef],
) -> TypeScanReport:
    """型とその operation に付いた、指定 kind のメタデータを列挙する。

    Parameters
    ----------
    target : type or str or None
        scan 対象のクラス、または `"pkg.mod:Class"` 形式のパス。
    recognized_kinds : Iterable[MetadataKind | KindSchema | str]
        対象とする kind。ここに無い kind のレコードは無視する。

    Returns
    -------
    TypeScanReport
        型レベルのレコードと、レコードが 1 件以上あった operation の発見結果。

    Raises
    ------
    NotFoundError
        型または kind を解決できない場合。途中結果は返さない。
    """

    descriptor = resolve_type(target)
    kinds = resolve_kinds(recognized_kinds)
    _logger.debug(
        "scan 開始: type=%s kinds=%s",
        descriptor.cls.__qualname__,
        [k.name for k in kinds],
    )

    type_records: list[MetadataRecord] = []
    for kind in kinds:
        if kind.allows(TARGET_TYPE):
            type_records.extend(descriptor.attached_metadata(kind))

    operations = descriptor.declared_operations()
    findings: list[OperationFinding] = []
    for op in operations:
        found: list[tuple[str, tuple[MetadataRecord, ...]]] = []
        for kind in kinds:
            if not kind.allows(TARGET_OPERATION):
                continue
            records = op.attached_metadata(kind)
            if records:
                found.append((kind.name, records))
        if found:
            findings.append(OperationFinding(operation_name=op.name, records=tuple(found)))

    _logger.debug(
        "scan 完了: type=%s operations=%d findings=%d type_records=%d",
        descriptor.cls.__qualname__,
        len(operations),
        len(findings),
        len(type_records),
    )
    return TypeScanReport(
        type_name=descriptor.name,
        type_records=tuple(type_records),
        findings=tuple(findings),
    )


__all__ = [
    "KindRef",
    "OperationDescriptor",
    "OperationFinding",
    "TypeDescriptor",
    "TypeScanReport",
    "resolve_kinds",
    "resolve_type",
    "scan_type",
]
