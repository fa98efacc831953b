# どこで: `src/metascan/demos/kinds.py`。
# 何を: デモで使うユーザー定義 kind（Service/Action/DeprecatedFeature/Task）を宣言する。
# なぜ: サービス定義側と scan 側の両方から同じ kind ハンドルを参照するため。

from __future__ import annotations

from metascan.core.kind_registry import metadata_kind


@metadata_kind(target="type", inherited=True)
class Service:
    """サービスとして公開するクラスの目印。サブクラスにも引き継がれる。"""

    name: str


@metadata_kind(target="operation")
class Action:
    """サービスの操作。priority は小さいほど低い。"""

    description: str
    priority: int = 1


@metadata_kind(target="operation")
class DeprecatedFeature:
    reason: str
    alternative: str = "None"


@metadata_kind(target="operation", repeatable=True)
class Task:
    """1 つのメソッドに複数付けられるタスク宣言。"""

    description: str
    priority: int = 1


__all__ = ["Action", "DeprecatedFeature", "Service", "Task"]
