# src/pica_shader_tracer/arch/pica/instructions/maps.py
"""
PICA200 オペコードマップ。

6bitのオペコード値すべて（64エントリ）に対して、表示名・命令クラス・
サブタイプフラグを定義します。テーブルは読み込み時に一度だけ構築され、以後は読み取り専用です。
"""
from dataclasses import dataclass
from enum import Enum, IntFlag
from types import MappingProxyType
from typing import Dict, Mapping

# @intent:responsibility 命令クラス。逆アセンブル時のレンダリング規則を選択します。
class OpcodeClass(Enum):
    ARITHMETIC = "ARITHMETIC"
    CONDITIONAL = "CONDITIONAL"

# @intent:responsibility 算術命令が持つオペランドの種類を表すサブタイプフラグ。
class OpcodeFlags(IntFlag):
    NONE = 0
    HAS_DESTINATION = 0x01
    HAS_SOURCE1 = 0x02
    HAS_SOURCE2 = 0x04
    WRITES_ADDRESS_REGISTER = 0x08
    HAS_COMPARE_OPERATORS = 0x10
    SOURCES_ARE_ORDER_INVERTED = 0x20

# @intent:responsibility オペコード1つ分の静的メタデータ。
@dataclass(frozen=True)
class OpcodeInfo:
    name: str
    opcode_class: OpcodeClass
    flags: OpcodeFlags = OpcodeFlags.NONE

    def has(self, flag: OpcodeFlags) -> bool:
        return bool(self.flags & flag)


_D = OpcodeFlags.HAS_DESTINATION
_S1 = OpcodeFlags.HAS_SOURCE1
_S2 = OpcodeFlags.HAS_SOURCE2
_MOVA = OpcodeFlags.WRITES_ADDRESS_REGISTER
_CMP = OpcodeFlags.HAS_COMPARE_OPERATORS
_INV = OpcodeFlags.SOURCES_ARE_ORDER_INVERTED

_ARITH = OpcodeClass.ARITHMETIC
_COND = OpcodeClass.CONDITIONAL

_KNOWN_OPCODES: Dict[int, OpcodeInfo] = {
    # --- Arithmetic ---
    0x00: OpcodeInfo("ADD", _ARITH, _D | _S1 | _S2),
    0x01: OpcodeInfo("DP3", _ARITH, _D | _S1 | _S2),
    0x02: OpcodeInfo("DP4", _ARITH, _D | _S1 | _S2),
    0x03: OpcodeInfo("DPH", _ARITH, _D | _S1 | _S2),
    0x05: OpcodeInfo("EX2", _ARITH, _D | _S1),
    0x06: OpcodeInfo("LG2", _ARITH, _D | _S1),
    0x08: OpcodeInfo("MUL", _ARITH, _D | _S1 | _S2),
    0x09: OpcodeInfo("SGE", _ARITH, _D | _S1 | _S2),
    0x0A: OpcodeInfo("SLT", _ARITH, _D | _S1 | _S2),
    0x0B: OpcodeInfo("FLR", _ARITH, _D | _S1),
    0x0C: OpcodeInfo("MAX", _ARITH, _D | _S1 | _S2),
    0x0D: OpcodeInfo("MIN", _ARITH, _D | _S1 | _S2),
    0x0E: OpcodeInfo("RCP", _ARITH, _D | _S1),
    0x0F: OpcodeInfo("RSQ", _ARITH, _D | _S1),
    0x12: OpcodeInfo("MOVA", _ARITH, _MOVA | _S1),
    0x13: OpcodeInfo("MOV", _ARITH, _D | _S1),
    # ソース順序反転版
    0x18: OpcodeInfo("DPHI", _ARITH, _INV | _D | _S1 | _S2),
    0x1A: OpcodeInfo("SGEI", _ARITH, _INV | _D | _S1 | _S2),
    0x1B: OpcodeInfo("SLTI", _ARITH, _INV | _D | _S1 | _S2),

    # --- オペランドなし ---
    0x21: OpcodeInfo("NOP", _ARITH),
    0x22: OpcodeInfo("END", _ARITH),
    0x2A: OpcodeInfo("EMIT", _ARITH),
    0x2B: OpcodeInfo("SETEMIT", _ARITH),

    # --- Flow control ---
    0x23: OpcodeInfo("BREAKC", _COND),
    0x24: OpcodeInfo("CALL", _COND),
    0x25: OpcodeInfo("CALLC", _COND),
    0x26: OpcodeInfo("CALLU", _COND),
    0x27: OpcodeInfo("IFU", _COND),
    0x28: OpcodeInfo("IFC", _COND),
    0x29: OpcodeInfo("LOOP", _COND),
    0x2C: OpcodeInfo("JMPC", _COND),
    0x2D: OpcodeInfo("JMPU", _COND),

    # CMP は比較演算子 x の最下位ビットがオペコードに食い込むため2エントリを占めます
    0x2E: OpcodeInfo("CMP", _ARITH, _S1 | _S2 | _CMP),
    0x2F: OpcodeInfo("CMP", _ARITH, _S1 | _S2 | _CMP),
}

# MAD/MADI は3ソースの独自エンコーディングを持つため、オペランド表示は行いません。
for _opcode in range(0x30, 0x38):
    _KNOWN_OPCODES[_opcode] = OpcodeInfo("MADI", _ARITH)
for _opcode in range(0x38, 0x40):
    _KNOWN_OPCODES[_opcode] = OpcodeInfo("MAD", _ARITH)

OPCODE_COUNT = 64

# @intent:responsibility 全64オペコードを網羅する読み取り専用テーブル。未定義の値は UNKxx として名前のみを持ちます。
OPCODE_MAP: Mapping[int, OpcodeInfo] = MappingProxyType({
    opcode: _KNOWN_OPCODES.get(opcode, OpcodeInfo(f"UNK{opcode:02X}", _ARITH))
    for opcode in range(OPCODE_COUNT)
})

def get_opcode_info(opcode: int) -> OpcodeInfo:
    return OPCODE_MAP[opcode & (OPCODE_COUNT - 1)]
