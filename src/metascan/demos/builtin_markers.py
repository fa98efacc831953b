"""
どこで: `src/metascan/demos/builtin_markers.py`。
何を: 標準ライブラリのマーカー（@override / @deprecated）と警告抑制を使うクラスを定義し、scan 結果を表示する。
なぜ: 型チェッカや実行時警告が読むマーカーも、組み込み kind として列挙できることを示すため。
"""

from __future__ import annotations

import logging
import warnings
from typing import override
from warnings import deprecated

from metascan.core.builtin_kinds import DEPRECATED, OVERRIDE
from metascan.core.runtime_config import runtime_config
from metascan.core.scanner import scan_type
from metascan.export.console import print_report


class BuiltInMarkers:
    @override
    def __str__(self) -> str:
        return "This is a BuiltInMarkers class."

    @deprecated("Use unchecked_warning_example() instead")
    def old_method(self) -> None:
        print("This method is deprecated and should not be used.")

    def unchecked_warning_example(self) -> None:
        # 非推奨メソッドの DeprecationWarning をこのブロック内だけ抑制する。
        with warnings.catch_warnings(action="ignore", category=DeprecationWarning):
            self.old_method()
        print("Warning suppressed: DeprecationWarning from old_method()")


def main() -> None:
    logging.basicConfig(level=runtime_config().log_level)
    markers = BuiltInMarkers()

    print(str(markers))
    markers.old_method()
    markers.unchecked_warning_example()

    print_report(scan_type(BuiltInMarkers, (OVERRIDE, DEPRECATED)))


if __name__ == "__main__":
    main()
