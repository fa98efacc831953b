"""
どこで: リポジトリ直下 `main.py`。
何を: OrderService / ProductService を scan してメタデータを表示する。
なぜ: 動作確認用の最小エントリポイントとして利用するため。
"""

import sys

sys.path.append("src")

from metascan.demos.custom_kinds import main

if __name__ == "__main__":
    main()
