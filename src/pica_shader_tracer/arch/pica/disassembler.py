# src/pica_shader_tracer/arch/pica/disassembler.py
"""
PICA200 頂点シェーダ逆アセンブラ。
"""
from typing import List, Sequence

from pica_shader_tracer.arch.pica.instructions import Instruction, OpcodeClass, OpcodeFlags, get_opcode_info
from pica_shader_tracer.arch.pica.registers import ADDRESS_REGISTER_DEST
from pica_shader_tracer.arch.pica.swizzle import SwizzlePattern
from pica_shader_tracer.common.errors import OutOfRangeError
from pica_shader_tracer.common.types import ListingRow
from pica_shader_tracer.core.program import ProgramInfo

# 列幅
MNEMONIC_WIDTH = 6
DEST_WIDTH = 6
SRC1_WIDTH = 8
FIELD_SEPARATOR = "  "

LISTING_HEADERS = ("Offset", "Raw", "Disassembly")
DEFAULT_OFFSET_DIGITS = 4

_OPERAND_FLAGS = (
    OpcodeFlags.HAS_DESTINATION
    | OpcodeFlags.HAS_SOURCE1
    | OpcodeFlags.HAS_SOURCE2
    | OpcodeFlags.WRITES_ADDRESS_REGISTER
)

# @intent:responsibility 命令が参照するデスクリプタをテーブルから取り出します。
# @intent:pre-condition デスクリプタIDはテーブルの範囲内である必要があります（負のインデックスによる末尾参照も許しません）。
def _lookup_swizzle(instruction: Instruction, swizzle_table: Sequence[SwizzlePattern]) -> SwizzlePattern:
    desc_id = instruction.operand_desc_id
    if not 0 <= desc_id < len(swizzle_table):
        raise OutOfRangeError(
            f"Operand descriptor {desc_id} out of range for table of {len(swizzle_table)} entries."
        )
    return swizzle_table[desc_id]

def _render_arithmetic(instruction: Instruction, flags: OpcodeFlags, swizzle: SwizzlePattern) -> str:
    # 反転フラグはレジスタ名の解決より前に決定する
    src_is_inverted = bool(flags & OpcodeFlags.SOURCES_ARE_ORDER_INVERTED)
    output = ""

    if flags & OpcodeFlags.WRITES_ADDRESS_REGISTER:
        dest = f"{ADDRESS_REGISTER_DEST}.{swizzle.dest_mask_to_string()}"
        output += dest.ljust(DEST_WIDTH) + FIELD_SEPARATOR
    elif flags & OpcodeFlags.HAS_DESTINATION:
        dest = f"{instruction.dest.get_name()}.{swizzle.dest_mask_to_string()}"
        output += dest.ljust(DEST_WIDTH) + FIELD_SEPARATOR
    else:
        output += " " * (DEST_WIDTH + len(FIELD_SEPARATOR))

    if flags & OpcodeFlags.HAS_SOURCE1:
        src1 = instruction.get_src1(src_is_inverted)
        relative = instruction.address_register_name()
        text = ("-" if swizzle.negate_src1 else "") + src1.get_name()
        if relative:
            text += f"[{relative}]"
        text += "." + swizzle.selector_to_string(False)
        output += text.ljust(SRC1_WIDTH) + FIELD_SEPARATOR
    else:
        output += " " * (SRC1_WIDTH + len(FIELD_SEPARATOR))

    if flags & OpcodeFlags.HAS_COMPARE_OPERATORS:
        output += f"{instruction.compare_op_x.to_string()} {instruction.compare_op_y.to_string()}" + FIELD_SEPARATOR

    # ソース2は相対アドレッシングを伴わない
    if flags & OpcodeFlags.HAS_SOURCE2:
        src2 = instruction.get_src2(src_is_inverted)
        output += ("-" if swizzle.negate_src2 else "") + src2.get_name() + "." + swizzle.selector_to_string(True)

    return output

# @intent:responsibility 1命令を人間が読める逆アセンブル文字列に変換します。
# @intent:rationale 副作用を持たず、同じ命令とテーブルに対して常に同じ文字列を返します。
def disassemble(instruction: Instruction, swizzle_table: Sequence[SwizzlePattern]) -> str:
    """
    命令ワードと、それが参照するデスクリプタテーブルから1行分の逆アセンブルを生成します。
    Conditional クラスの命令はニーモニックのみを出力します。
    """
    info = get_opcode_info(instruction.opcode)
    output = info.name.ljust(MNEMONIC_WIDTH)

    if info.opcode_class is OpcodeClass.ARITHMETIC:
        # オペランドを持たない命令はデスクリプタを参照しない
        if info.flags & _OPERAND_FLAGS:
            swizzle = _lookup_swizzle(instruction, swizzle_table)
            output += _render_arithmetic(instruction, info.flags, swizzle)
    elif info.opcode_class is OpcodeClass.CONDITIONAL:
        pass
    else:
        raise ValueError(f"Unhandled opcode class: {info.opcode_class}")

    return output.rstrip()

def format_offset_column(program: ProgramInfo, row: int, digits: int = DEFAULT_OFFSET_DIGITS) -> str:
    """
    行にラベルがあればラベル名を、無ければバイトオフセットを16進で返します。
    """
    if digits < 1:
        raise ValueError(f"Offset column needs at least one digit, got {digits}.")
    if program.has_label_at(row):
        return program.label_at(row)
    return f"{4 * row:0{digits}x}"

def format_raw_column(instruction: Instruction) -> str:
    return f"{instruction.hex:08x}"

# @intent:responsibility プログラム全体を (オフセット, RAW, 逆アセンブル) の行リストに変換します。
def disassemble_program(program: ProgramInfo, digits: int = DEFAULT_OFFSET_DIGITS) -> List[ListingRow]:
    rows = []
    for row, instruction in enumerate(program.code):
        rows.append(ListingRow(
            offset=format_offset_column(program, row, digits),
            raw=format_raw_column(instruction),
            disassembly=disassemble(instruction, program.swizzle_info),
        ))
    return rows
