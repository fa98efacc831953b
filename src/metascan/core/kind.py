# どこで: `src/metascan/core/kind.py`。
# 何を: メタデータ kind のスキーマ（FieldSpec/KindSchema）と、付与済みレコード MetadataRecord を提供する。
# なぜ: 付与時の検証と読み出し時の default 解決を、宣言構文（デコレータ等）から切り離して一元化するため。

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

TARGET_TYPE = "type"
TARGET_OPERATION = "operation"
_ALLOWED_TARGETS = frozenset({TARGET_TYPE, TARGET_OPERATION})

NO_DEFAULT: Any = inspect.Parameter.empty
"""default 未指定（必須フィールド）を表す番兵。"""

RecordReader = Callable[[object, "KindSchema"], "tuple[MetadataRecord, ...]"]


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """kind の 1 フィールドぶんの宣言。

    type が None の場合は値の型を検査しない。
    """

    name: str
    type: type | None = None
    default: Any = NO_DEFAULT

    @property
    def required(self) -> bool:
        return self.default is NO_DEFAULT

    def check(self, value: Any, *, kind: str) -> None:
        """value がこのフィールドの型に適合するか検査する。

        Raises
        ------
        TypeError
            型が一致しない場合。int フィールドへの bool も拒否する。
        """

        expected = self.type
        if expected is None:
            return
        if isinstance(value, bool) and expected is not bool:
            ok = False
        elif expected is float:
            ok = isinstance(value, (int, float))
        else:
            ok = isinstance(value, expected)
        if not ok:
            raise TypeError(
                f"kind '{kind}' のフィールド {self.name!r} は {expected.__name__} である必要があります:"
                f" got={value!r}"
            )


@dataclass(frozen=True, slots=True)
class KindSchema:
    """メタデータ kind 1 種類ぶんの静的情報。

    Notes
    -----
    - targets は `"type"`（クラス）/ `"operation"`（メソッド）の部分集合。
    - repeatable=False の kind は 1 要素に 1 レコードまで。
    - inherited=True の type 向け kind はサブクラスからも見える。
    - reader を持つ kind（組み込み kind）は付与ストアではなく reader からレコードを得る。
    """

    name: str
    fields: tuple[FieldSpec, ...] = ()
    targets: frozenset[str] = frozenset({TARGET_OPERATION})
    repeatable: bool = False
    inherited: bool = False
    reader: RecordReader | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("kind 名は空にできない")
        if not self.targets or not self.targets <= _ALLOWED_TARGETS:
            raise ValueError(
                f"kind '{self.name}' の targets が不正: {sorted(self.targets)!r}"
                f"（許可: {sorted(_ALLOWED_TARGETS)!r}）"
            )
        names = [f.name for f in self.fields]
        if len(set(names)) != len(names):
            raise ValueError(f"kind '{self.name}' のフィールド名が重複している: {names!r}")

    def get_field(self, name: str) -> FieldSpec:
        """フィールド宣言を返す。未知名なら KeyError。"""

        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"kind '{self.name}' にフィールド {name!r} は無い")

    def allows(self, target: str) -> bool:
        return target in self.targets

    def make_record(self, values: Mapping[str, Any]) -> MetadataRecord:
        """付与箇所で与えられた値を検証し MetadataRecord を返す。

        Parameters
        ----------
        values : Mapping[str, Any]
            付与箇所で明示された値。未指定の任意フィールドは含めない。

        Raises
        ------
        TypeError
            未知フィールド、必須フィールドの欠落、型不一致のいずれか。
        """

        known = {f.name for f in self.fields}
        unknown = set(values) - known
        if unknown:
            names = ", ".join(sorted(str(k) for k in unknown))
            raise TypeError(f"kind '{self.name}' に未知のフィールドがあります: {names}")

        missing = [f.name for f in self.fields if f.required and f.name not in values]
        if missing:
            raise TypeError(f"kind '{self.name}' の必須フィールドが未指定です: {', '.join(missing)}")

        for spec in self.fields:
            if spec.name in values:
                spec.check(values[spec.name], kind=self.name)

        supplied = tuple((f.name, values[f.name]) for f in self.fields if f.name in values)
        return MetadataRecord(schema=self, supplied=supplied)


@dataclass(frozen=True, slots=True, repr=False)
class MetadataRecord:
    """要素に付与された 1 件のメタデータ。

    supplied は付与箇所で明示された値だけを持つ。
    未指定フィールドは読み出し時に schema の default で解決する。
    """

    schema: KindSchema
    supplied: tuple[tuple[str, Any], ...] = ()

    @property
    def kind(self) -> str:
        return self.schema.name

    def __getitem__(self, name: str) -> Any:
        for key, value in self.supplied:
            if key == name:
                return value
        return self.schema.get_field(name).default

    def get(self, name: str, default: Any = None) -> Any:
        try:
            return self[name]
        except KeyError:
            return default

    def is_default(self, name: str) -> bool:
        """値が schema の default から来ているなら True。"""

        self.schema.get_field(name)
        return all(key != name for key, _ in self.supplied)

    def as_dict(self) -> dict[str, Any]:
        """全フィールドを schema の宣言順で返す。"""

        return {spec.name: self[spec.name] for spec in self.schema.fields}

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v!r}" for k, v in self.as_dict().items())
        return f"{self.kind}({body})"


__all__ = [
    "FieldSpec",
    "KindSchema",
    "MetadataRecord",
    "NO_DEFAULT",
    "RecordReader",
    "TARGET_OPERATION",
    "TARGET_TYPE",
]
