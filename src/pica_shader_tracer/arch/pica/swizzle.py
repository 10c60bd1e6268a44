# src/pica_shader_tracer/arch/pica/swizzle.py
"""
オペランドデスクリプタ（スウィズルパターン）。

デスクリプタテーブルの1エントリを解析し、書き込みマスクと
ソースごとのセレクタ・符号反転フラグを提供します。
"""
from dataclasses import dataclass
from typing import Tuple

# @intent:constant 4つのベクトル成分の表示名。セレクタ値 0..3 に対応。
COMPONENTS = "xyzw"

# ビット位置
DEST_MASK_BITS = 0xF
NEGATE_SRC1_SHIFT = 4
SRC1_SELECTOR_SHIFT = 5
NEGATE_SRC2_SHIFT = 13
SRC2_SELECTOR_SHIFT = 14

# @intent:responsibility 8bitのセレクタフィールドを成分ごとの値 (x, y, z, w) に分解します。
# @intent:note x のセレクタが最上位の2bit、w が最下位の2bitに格納されています。
def _unpack_selector(field: int) -> Tuple[int, int, int, int]:
    return tuple((field >> ((3 - i) * 2)) & 0x3 for i in range(4))

def _pack_selector(selector: Tuple[int, int, int, int]) -> int:
    field = 0
    for i, value in enumerate(selector):
        field |= (value & 0x3) << ((3 - i) * 2)
    return field


# @intent:responsibility 1つのオペランドデスクリプタの内容を不変に保持します。
@dataclass(frozen=True)
class SwizzlePattern:
    """
    デスクリプタワードから復元したスウィズルパターン。
    dest_mask は bit3 が x、bit0 が w を表します。
    """
    dest_mask: int = 0
    negate_src1: bool = False
    src1_selector: Tuple[int, int, int, int] = (0, 1, 2, 3)
    negate_src2: bool = False
    src2_selector: Tuple[int, int, int, int] = (0, 1, 2, 3)

    @classmethod
    def from_word(cls, word: int) -> "SwizzlePattern":
        return cls(
            dest_mask=word & DEST_MASK_BITS,
            negate_src1=bool((word >> NEGATE_SRC1_SHIFT) & 1),
            src1_selector=_unpack_selector((word >> SRC1_SELECTOR_SHIFT) & 0xFF),
            negate_src2=bool((word >> NEGATE_SRC2_SHIFT) & 1),
            src2_selector=_unpack_selector((word >> SRC2_SELECTOR_SHIFT) & 0xFF),
        )

    # @intent:responsibility デスクリプタワードへ再エンコードします。未使用ビット（src3 など）は 0 になります。
    def to_word(self) -> int:
        return (
            (self.dest_mask & DEST_MASK_BITS)
            | (int(self.negate_src1) << NEGATE_SRC1_SHIFT)
            | (_pack_selector(self.src1_selector) << SRC1_SELECTOR_SHIFT)
            | (int(self.negate_src2) << NEGATE_SRC2_SHIFT)
            | (_pack_selector(self.src2_selector) << SRC2_SELECTOR_SHIFT)
        )

    def dest_component_enabled(self, component: int) -> bool:
        return bool(self.dest_mask & (0x8 >> component))

    # @intent:responsibility 書き込まれる成分だけを並べたマスク文字列を返します。マスクが空なら空文字列。
    def dest_mask_to_string(self) -> str:
        return "".join(COMPONENTS[i] for i in range(4) if self.dest_component_enabled(i))

    # @intent:responsibility ソース1またはソース2のセレクタを4文字の文字列で返します。
    def selector_to_string(self, src2: bool) -> str:
        selector = self.src2_selector if src2 else self.src1_selector
        return "".join(COMPONENTS[value] for value in selector)
