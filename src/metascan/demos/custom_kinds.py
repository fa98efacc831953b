"""
どこで: `src/metascan/demos/custom_kinds.py`。
何を: Service が付いたクラスを scan し、Action/DeprecatedFeature の付いた operation を表示する。
なぜ: ユーザー定義 kind がフィールド値ごと実行時に取り出せることを示すため。
"""

from __future__ import annotations

import logging

from metascan.core.runtime_config import runtime_config
from metascan.core.scanner import TypeScanReport, scan_type
from metascan.export.console import print_report

from .kinds import Action, DeprecatedFeature, Service
from .services import OrderService, ProductService

_logger = logging.getLogger(__name__)

RECOGNIZED_KINDS = (Service, Action, DeprecatedFeature)


def inspect_service(cls: type | str) -> TypeScanReport | None:
    """cls に Service が付いていれば scan して表示し、レポートを返す。"""

    report = scan_type(cls, RECOGNIZED_KINDS)
    if not any(r.kind == Service.name for r in report.type_records):
        _logger.info("Service が付いていないため skip: %s", report.type_name)
        return None
    print_report(report)
    return report


def main() -> None:
    logging.basicConfig(level=runtime_config().log_level)
    inspect_service(OrderService)
    inspect_service(ProductService)


if __name__ == "__main__":
    main()
