# どこで: `src/metascan/core/errors.py`。
# 何を: scan 時の解決失敗を表す例外を提供する。
# なぜ: 「型/kind が見つからない」を KeyError や ImportError と区別して呼び出し側へ伝えるため。

from __future__ import annotations


class NotFoundError(LookupError):
    """scan 対象の型、または指定された kind を解決できなかった。"""


__all__ = ["NotFoundError"]
