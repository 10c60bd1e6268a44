# src/pica_shader_tracer/loader/container.py
"""
シェーダコンテナ (DVLB/DVLP/DVLE) のエンコーダ／デコーダ。

コンテナは次のレイアウトを持つリトルエンディアンのバイナリです。

    DVLB ヘッダ   {magic, num_programs} + DVLE オフセット表 (num_programs 個)
    DVLP ヘッダ   0x1C バイト。binary_offset / swizzle_offset は DVLP 先頭からの相対値
    DVLE ヘッダ   0x40 バイト。main_offset_words はバイナリ内の命令単位オフセット
    命令ワード列
    デスクリプタ表 (デスクリプタワード + 予約4バイト) × エントリ数
"""
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Tuple

from construct import Array, Const, ConstructError, Int8ul, Int16ul, Int32ul, Padding, Struct

from pica_shader_tracer.common.errors import MalformedContainerError

logger = logging.getLogger(__name__)

# @intent:responsibility DVLE ヘッダが示すシェーダの種類。
class ShaderType(IntEnum):
    VERTEX = 0
    GEOMETRY = 1

DVLB_MAGIC = b"DVLB"
DVLP_MAGIC = b"DVLP"
DVLE_MAGIC = b"DVLE"

DvlbHeader = Struct(
    "magic" / Const(DVLB_MAGIC),
    "num_programs" / Int32ul,
)

DvlpHeader = Struct(
    "magic" / Const(DVLP_MAGIC),
    "version" / Int32ul,
    "binary_offset" / Int32ul,
    "binary_size_words" / Int32ul,
    "swizzle_offset" / Int32ul,
    "swizzle_num_entries" / Int32ul,
    "unk2" / Int32ul,
)

DvleHeader = Struct(
    "magic" / Const(DVLE_MAGIC),
    "pad1" / Int16ul,
    "shader_type" / Int8ul,
    "pad2" / Int8ul,
    "main_offset_words" / Int32ul,
    "endmain_offset_words" / Int32ul,
    "pad3" / Int32ul,
    "pad4" / Int32ul,
    "constant_table_offset" / Int32ul,
    "constant_table_size" / Int32ul,
    "label_table_offset" / Int32ul,
    "label_table_size" / Int32ul,
    "output_register_table_offset" / Int32ul,
    "output_register_table_size" / Int32ul,
    "uniform_table_offset" / Int32ul,
    "uniform_table_size" / Int32ul,
    "symbol_table_offset" / Int32ul,
    "symbol_table_size" / Int32ul,
)

# @intent:rationale デスクリプタは1エントリ8バイトのストライドで格納され、後半4バイトは予約領域です。
SwizzleEntry = Struct(
    "pattern" / Int32ul,
    Padding(4),
)

DVLB_HEADER_SIZE = DvlbHeader.sizeof()    # 0x08
DVLP_HEADER_SIZE = DvlpHeader.sizeof()    # 0x1C
DVLE_HEADER_SIZE = DvleHeader.sizeof()    # 0x40
SWIZZLE_ENTRY_SIZE = SwizzleEntry.sizeof()  # 0x08
WORD_SIZE = 4

# @intent:responsibility コンテナから復元された3つのバイナリストリームを保持します。
@dataclass(frozen=True)
class ShaderBinary:
    instructions: Tuple[int, ...]
    swizzle_patterns: Tuple[int, ...]
    main_offset: int
    shader_type: ShaderType = ShaderType.VERTEX


def _check_words(name: str, words: Tuple[int, ...]) -> None:
    for i, word in enumerate(words):
        if not 0 <= word <= 0xFFFFFFFF:
            raise ValueError(f"{name}[{i}] = {word:#x} is not a 32-bit value.")

# @intent:responsibility 命令列・デスクリプタ表・エントリポイントから単一プログラムのコンテナを生成します。
# @intent:rationale ヘッダのサイズ・オフセット値は実際のペイロード長からのみ算出し、呼び出し側には指定させません。
def encode_shader(instructions: Iterable[int], swizzle_patterns: Iterable[int], main_offset: int,
                  shader_type: ShaderType = ShaderType.VERTEX) -> bytes:
    """
    シェーダコンテナをバイト列として生成します。
    """
    instructions = tuple(instructions)
    swizzle_patterns = tuple(swizzle_patterns)
    _check_words("instructions", instructions)
    _check_words("swizzle_patterns", swizzle_patterns)
    if not 0 <= main_offset <= 0xFFFFFFFF:
        raise ValueError(f"Main offset {main_offset} is not representable as a 32-bit word offset.")

    num_programs = 1
    dvlb_size = DVLB_HEADER_SIZE + WORD_SIZE * num_programs
    dvle_offset = dvlb_size + DVLP_HEADER_SIZE
    # DVLP 先頭からの相対値
    binary_offset = DVLP_HEADER_SIZE + DVLE_HEADER_SIZE
    swizzle_offset = binary_offset + WORD_SIZE * len(instructions)

    dvlb = DvlbHeader.build(dict(num_programs=num_programs))
    offset_table = Array(num_programs, Int32ul).build([dvle_offset])
    dvlp = DvlpHeader.build(dict(
        version=0,
        binary_offset=binary_offset,
        binary_size_words=len(instructions),
        swizzle_offset=swizzle_offset,
        swizzle_num_entries=len(swizzle_patterns),
        unk2=0,
    ))
    dvle = DvleHeader.build(dict(
        pad1=0,
        shader_type=int(shader_type),
        pad2=0,
        main_offset_words=main_offset,
        endmain_offset_words=len(instructions),
        pad3=0,
        pad4=0,
        # 補助テーブルは空。オフセットはDVLEヘッダ直後を指す
        constant_table_offset=DVLE_HEADER_SIZE, constant_table_size=0,
        label_table_offset=DVLE_HEADER_SIZE, label_table_size=0,
        output_register_table_offset=DVLE_HEADER_SIZE, output_register_table_size=0,
        uniform_table_offset=DVLE_HEADER_SIZE, uniform_table_size=0,
        symbol_table_offset=DVLE_HEADER_SIZE, symbol_table_size=0,
    ))
    binary = Array(len(instructions), Int32ul).build(list(instructions))
    swizzles = Array(len(swizzle_patterns), SwizzleEntry).build([dict(pattern=p) for p in swizzle_patterns])

    data = dvlb + offset_table + dvlp + dvle + binary + swizzles
    logger.debug("Encoded shader container: %d instructions, %d swizzle patterns, %d bytes",
                 len(instructions), len(swizzle_patterns), len(data))
    return data


def _require_range(data: bytes, start: int, size: int, what: str) -> None:
    if start < 0 or size < 0 or start + size > len(data):
        raise MalformedContainerError(
            f"{what} at offset {start:#x} with size {size:#x} exceeds container of {len(data):#x} bytes."
        )

def _parse(struct_type, data: bytes, start: int, what: str):
    _require_range(data, start, struct_type.sizeof(), what)
    try:
        return struct_type.parse(data[start:start + struct_type.sizeof()])
    except ConstructError as e:
        raise MalformedContainerError(f"Invalid {what} at offset {start:#x}: {e}") from e

# @intent:responsibility コンテナを解析し、命令列・デスクリプタ表・エントリポイントを復元します。
# @intent:pre-condition 入力はすべて信頼できないものとして扱い、3つのマジックワードを検証してからオフセットを使用します。
def decode_shader(data: bytes, program_index: int = 0) -> ShaderBinary:
    """
    シェーダコンテナのバイト列から ShaderBinary を復元します。
    マジックワードの不一致や、宣言されたオフセット・サイズがバッファ外を指す場合は
    MalformedContainerError を送出します。
    """
    data = bytes(data)

    dvlb = _parse(DvlbHeader, data, 0, "DVLB header")
    num_programs = dvlb.num_programs
    if not 0 <= program_index < num_programs:
        raise MalformedContainerError(
            f"Program index {program_index} not present in container declaring {num_programs} programs."
        )
    _require_range(data, DVLB_HEADER_SIZE, WORD_SIZE * num_programs, "DVLE offset table")
    offsets = Array(num_programs, Int32ul).parse(data[DVLB_HEADER_SIZE:DVLB_HEADER_SIZE + WORD_SIZE * num_programs])

    dvlp_start = DVLB_HEADER_SIZE + WORD_SIZE * num_programs
    dvlp = _parse(DvlpHeader, data, dvlp_start, "DVLP header")
    dvle = _parse(DvleHeader, data, offsets[program_index], "DVLE header")

    binary_start = dvlp_start + dvlp.binary_offset
    _require_range(data, binary_start, WORD_SIZE * dvlp.binary_size_words, "Shader binary")
    swizzle_start = dvlp_start + dvlp.swizzle_offset
    _require_range(data, swizzle_start, SWIZZLE_ENTRY_SIZE * dvlp.swizzle_num_entries, "Swizzle table")

    try:
        shader_type = ShaderType(dvle.shader_type)
    except ValueError as e:
        raise MalformedContainerError(f"Unknown shader type {dvle.shader_type}.") from e

    instructions = Array(dvlp.binary_size_words, Int32ul).parse(
        data[binary_start:binary_start + WORD_SIZE * dvlp.binary_size_words])
    entries = Array(dvlp.swizzle_num_entries, SwizzleEntry).parse(
        data[swizzle_start:swizzle_start + SWIZZLE_ENTRY_SIZE * dvlp.swizzle_num_entries])

    logger.debug("Decoded shader container: %d instructions, %d swizzle patterns, main at %d",
                 len(instructions), len(entries), dvle.main_offset_words)
    return ShaderBinary(
        instructions=tuple(instructions),
        swizzle_patterns=tuple(entry.pattern for entry in entries),
        main_offset=dvle.main_offset_words,
        shader_type=shader_type,
    )
