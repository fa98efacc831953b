# どこで: `src/metascan/core/kind_registry.py`。
# 何を: kind 名 -> KindSchema のレジストリと、kind を宣言する `@metadata_kind` デコレータを提供する。
# なぜ: scan 側が kind を名前でも引けるようにし、評価順（登録順）を一元化するため。

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, ItemsView, Iterable
from typing import Any, TypeVar, overload

from .attachment import attach
from .errors import NotFoundError
from .kind import NO_DEFAULT, TARGET_OPERATION, FieldSpec, KindSchema

_logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class KindRegistry:
    """kind 名と KindSchema を対応付けるレジストリ。

    Notes
    -----
    dict の挿入順を登録順として扱う。上書き登録しても順位は最初の登録時のまま。
    """

    def __init__(self) -> None:
        """空のレジストリを初期化する。"""
        self._items: dict[str, KindSchema] = {}

    def _register(self, schema: KindSchema, *, overwrite: bool = True) -> None:
        """kind を登録する（内部用）。

        Notes
        -----
        登録は `@metadata_kind` と組み込み kind モジュールからのみ行う。
        """
        name = schema.name
        if name in self._items:
            if not overwrite:
                raise ValueError(f"kind '{name}' は既に登録されている")
            _logger.info("kind '%s' を上書き登録します", name)
        else:
            _logger.debug("kind '%s' を登録します", name)
        self._items[name] = schema

    def get(self, name: str) -> KindSchema:
        """kind 名に対応する KindSchema を取得する。

        Raises
        ------
        NotFoundError
            未登録の kind 名が指定された場合。
        """
        try:
            return self._items[name]
        except KeyError:
            raise NotFoundError(f"kind '{name}' は登録されていない") from None

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __getitem__(self, name: str) -> KindSchema:
        return self.get(name)

    def items(self) -> ItemsView[str, KindSchema]:
        """登録済みエントリの (name, schema) ビューを返す。"""
        return self._items.items()

    def order_of(self, name: str) -> int:
        """登録順（0 始まり）を返す。"""
        for i, key in enumerate(self._items):
            if key == name:
                return i
        raise NotFoundError(f"kind '{name}' は登録されていない")

    def resolve(self, kind: MetadataKind | KindSchema | str) -> KindSchema:
        """kind ハンドル/スキーマ/名前から登録済み KindSchema を返す。"""
        if isinstance(kind, MetadataKind):
            return self.get(kind.name)
        if isinstance(kind, KindSchema):
            return self.get(kind.name)
        if isinstance(kind, str):
            return self.get(kind)
        raise TypeError(f"kind の指定が不正: got={kind!r}")


kind_registry = KindRegistry()
"""グローバルな kind レジストリインスタンス。"""


class MetadataKind:
    """宣言済み kind のハンドル。

    フィールド値を渡して呼ぶと、クラス/関数へレコードを付与するデコレータを返す。

    Examples
    --------
    @Action(description="Processes the order", priority=2)
    def process_order(self): ...
    """

    __slots__ = ("schema",)

    def __init__(self, schema: KindSchema) -> None:
        self.schema = schema

    @property
    def name(self) -> str:
        return self.schema.name

    def __call__(self, **values: Any) -> Callable[[_T], _T]:
        record = self.schema.make_record(values)

        def decorator(target: _T) -> _T:
            attach(target, record)
            return target

        return decorator

    def __repr__(self) -> str:
        return f"MetadataKind({self.schema.name!r})"


def _fields_from_class(cls: type) -> tuple[FieldSpec, ...]:
    """クラス本体の注釈と代入値から FieldSpec 列を作る。"""

    annotations = inspect.get_annotations(cls, eval_str=True)
    namespace = vars(cls)
    fields: list[FieldSpec] = []
    for name, annotation in annotations.items():
        if not isinstance(annotation, type):
            raise TypeError(
                f"kind '{cls.__name__}' のフィールド {name!r} の型注釈はクラスである必要がある:"
                f" got={annotation!r}"
            )
        default = namespace.get(name, NO_DEFAULT)
        spec = FieldSpec(name=name, type=annotation, default=default)
        if not spec.required:
            spec.check(default, kind=cls.__name__)
        fields.append(spec)
    return tuple(fields)


def _as_targets(target: str | Iterable[str]) -> frozenset[str]:
    if isinstance(target, str):
        return frozenset({target})
    return frozenset(str(t) for t in target)


@overload
def metadata_kind(cls: type, /) -> MetadataKind: ...


@overload
def metadata_kind(
    cls: None = None,
    /,
    *,
    name: str | None = None,
    target: str | Iterable[str] = TARGET_OPERATION,
    repeatable: bool = False,
    inherited: bool = False,
    overwrite: bool = True,
) -> Callable[[type], MetadataKind]: ...


def metadata_kind(
    cls: type | None = None,
    /,
    *,
    name: str | None = None,
    target: str | Iterable[str] = TARGET_OPERATION,
    repeatable: bool = False,
    inherited: bool = False,
    overwrite: bool = True,
):
    """クラス宣言から kind を定義し、グローバルレジストリへ登録するデコレータ。

    クラス本体の型注釈がフィールド、代入値がその default になる。
    クラス名がそのまま kind 名になる（name で上書き可）。

    Parameters
    ----------
    cls : type or None, optional
        デコレート対象のクラス。引数付きデコレータ利用時は None。
    name : str or None, optional
        kind 名。None ならクラス名。
    target : str or Iterable[str], optional
        付与先。`"type"` / `"operation"` またはその列。
    repeatable : bool, optional
        同じ要素へ複数回付与できるかどうか。
    inherited : bool, optional
        type 向け kind をサブクラスからも見えるようにするかどうか。
    overwrite : bool, optional
        同名 kind が既にある場合に上書きするかどうか。

    Examples
    --------
    @metadata_kind(target="operation")
    class Action:
        description: str
        priority: int = 1
    """

    def decorator(c: type) -> MetadataKind:
        schema = KindSchema(
            name=name or c.__name__,
            fields=_fields_from_class(c),
            targets=_as_targets(target),
            repeatable=bool(repeatable),
            inherited=bool(inherited),
        )
        kind_registry._register(schema, overwrite=overwrite)
        return MetadataKind(schema)

    if cls is None:
        return decorator
    return decorator(cls)


__all__ = ["KindRegistry", "MetadataKind", "kind_registry", "metadata_kind"]
