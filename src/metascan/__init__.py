# どこで: `src/metascan/__init__.py`。
# 何を: ルート `metascan` パッケージとして kind 宣言・scan・表示の公開 API を再エクスポートする。
# なぜ: import 起点を `metascan` に統一するため。

from __future__ import annotations

from metascan.core.errors import NotFoundError
from metascan.core.kind import FieldSpec, KindSchema, MetadataRecord
from metascan.core.kind_registry import MetadataKind, kind_registry, metadata_kind
from metascan.core.scanner import OperationFinding, TypeScanReport, scan_type
from metascan.export.console import format_report, print_report

__all__ = [
    "FieldSpec",
    "KindSchema",
    "MetadataKind",
    "MetadataRecord",
    "NotFoundError",
    "OperationFinding",
    "TypeScanReport",
    "format_report",
    "kind_registry",
    "metadata_kind",
    "print_report",
    "scan_type",
]
