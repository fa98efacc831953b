# どこで: `src/metascan/demos/__init__.py`。
# 何を: 引数なしで実行できるデモ（組み込みマーカー / ユーザー定義 kind / repeatable kind）をまとめる。
# なぜ: 各デモを `python -m metascan.demos.<name>` で個別に起動できるようにするため。
