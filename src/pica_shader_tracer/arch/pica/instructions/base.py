# src/pica_shader_tracer/arch/pica/instructions/base.py
"""
PICA200 命令ワードのビットフィールド解析ロジック。
"""
from dataclasses import dataclass
from enum import IntEnum

from pica_shader_tracer.arch.pica.registers import SourceRegister, DestRegister, address_register_name

# @intent:responsibility 比較命令 (CMP) の比較演算子を定義します。
class CompareOp(IntEnum):
    EQUAL = 0
    NOT_EQUAL = 1
    LESS_THAN = 2
    LESS_EQUAL = 3
    GREATER_THAN = 4
    GREATER_EQUAL = 5
    UNK6 = 6
    UNK7 = 7

    def to_string(self) -> str:
        return _COMPARE_OP_TOKENS[self]

_COMPARE_OP_TOKENS = {
    CompareOp.EQUAL: "==",
    CompareOp.NOT_EQUAL: "!=",
    CompareOp.LESS_THAN: "<",
    CompareOp.LESS_EQUAL: "<=",
    CompareOp.GREATER_THAN: ">",
    CompareOp.GREATER_EQUAL: ">=",
    CompareOp.UNK6: "UNK6",
    CompareOp.UNK7: "UNK7",
}

def _bits(value: int, shift: int, width: int) -> int:
    return (value >> shift) & ((1 << width) - 1)


# @intent:responsibility 不変の32bit命令ワードと、その共通フィールドへのアクセサを提供します。
# @intent:rationale ソース順序反転の有無で src1/src2 のビット幅が入れ替わるため、
#                  反転フラグはレジスタ名の解決前に適用する必要があります。
@dataclass(frozen=True)
class Instruction:
    """
    エンコード済みの命令ワード。
    """
    hex: int

    def __post_init__(self):
        if not 0 <= self.hex <= 0xFFFFFFFF:
            raise ValueError(f"Instruction word {self.hex:#x} is not a 32-bit value.")

    @property
    def opcode(self) -> int:
        return _bits(self.hex, 26, 6)

    @property
    def operand_desc_id(self) -> int:
        return _bits(self.hex, 0, 7)

    @property
    def address_register_index(self) -> int:
        return _bits(self.hex, 19, 2)

    @property
    def dest(self) -> DestRegister:
        return DestRegister.from_raw(_bits(self.hex, 21, 5))

    @property
    def compare_op_x(self) -> CompareOp:
        return CompareOp(_bits(self.hex, 24, 3))

    @property
    def compare_op_y(self) -> CompareOp:
        return CompareOp(_bits(self.hex, 21, 3))

    def address_register_name(self) -> str:
        return address_register_name(self.address_register_index)

    # 通常: src1 は bit12 から7bit、反転時: bit14 から5bit
    def get_src1(self, is_inverted: bool) -> SourceRegister:
        if is_inverted:
            return SourceRegister.from_raw(_bits(self.hex, 14, 5))
        return SourceRegister.from_raw(_bits(self.hex, 12, 7))

    # 通常: src2 は bit7 から5bit、反転時: bit7 から7bit
    def get_src2(self, is_inverted: bool) -> SourceRegister:
        if is_inverted:
            return SourceRegister.from_raw(_bits(self.hex, 7, 7))
        return SourceRegister.from_raw(_bits(self.hex, 7, 5))
