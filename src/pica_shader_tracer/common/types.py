"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される汎用的な型エイリアスなどを定義します。
"""
from typing import Iterable, NamedTuple

# @intent:data_structure 外部メモリから供給される32bitワード列。
WordSource = Iterable[int]

# @intent:data_structure 逆アセンブルリストの1行 (オフセット列, RAW列, 逆アセンブル列)。
class ListingRow(NamedTuple):
    offset: str
    raw: str
    disassembly: str
