# tests/loader/test_container.py
"""
シェーダコンテナ (DVLB/DVLP/DVLE) エンコーダ／デコーダの単体テスト。
"""
import struct

import pytest

from pica_shader_tracer.common.errors import MalformedContainerError
from pica_shader_tracer.loader.container import (
    DVLE_HEADER_SIZE,
    DVLP_HEADER_SIZE,
    ShaderBinary,
    ShaderType,
    decode_shader,
    encode_shader,
)

INSTRUCTIONS = [0x02000080, 0x4C225001, 0x84000000, 0x88000000]
PATTERNS = [0x0016C31E, 0x0000000F, 0x0000000C]

@pytest.fixture
def container():
    return encode_shader(INSTRUCTIONS, PATTERNS, 2)

def _word(data, offset):
    return struct.unpack_from("<I", data, offset)[0]

# @intent:test_suite コンテナのレイアウトとヘッダ値を検証します。
class TestEncode:
    def test_sizes(self):
        assert DVLP_HEADER_SIZE == 0x1C
        assert DVLE_HEADER_SIZE == 0x40

    # @intent:test_case_layout 各ヘッダの位置とオフセット値が決められたレイアウトに従うことを検証します。
    def test_header_values(self, container):
        assert container[0:4] == b"DVLB"
        assert _word(container, 4) == 1
        assert _word(container, 8) == 40            # DVLE オフセット
        assert container[12:16] == b"DVLP"
        assert _word(container, 12 + 8) == 92       # binary_offset (DVLP 相対)
        assert _word(container, 12 + 12) == len(INSTRUCTIONS)
        assert _word(container, 12 + 16) == 92 + 4 * len(INSTRUCTIONS)
        assert _word(container, 12 + 20) == len(PATTERNS)
        assert container[40:44] == b"DVLE"
        assert container[46] == ShaderType.VERTEX
        assert _word(container, 40 + 8) == 2        # main
        assert _word(container, 40 + 12) == len(INSTRUCTIONS)  # endmain

    def test_total_size(self, container):
        assert len(container) == 12 + 0x1C + 0x40 + 4 * len(INSTRUCTIONS) + 8 * len(PATTERNS)

    def test_payload_placement(self, container):
        binary_start = 12 + 92
        assert [_word(container, binary_start + 4 * i) for i in range(4)] == INSTRUCTIONS
        swizzle_start = binary_start + 16
        assert _word(container, swizzle_start) == PATTERNS[0]
        assert _word(container, swizzle_start + 4) == 0
        assert _word(container, swizzle_start + 8) == PATTERNS[1]

    def test_rejects_invalid_words(self):
        with pytest.raises(ValueError, match="not a 32-bit value"):
            encode_shader([0x100000000], [], 0)
        with pytest.raises(ValueError, match="not a 32-bit value"):
            encode_shader([], [-1], 0)

    def test_rejects_negative_main_offset(self):
        with pytest.raises(ValueError):
            encode_shader([], [], -1)


# @intent:test_suite デコード結果と、不正な入力に対する検出を検証します。
class TestDecode:
    # @intent:test_case_round_trip エンコードしたストリームがそのまま復元されることを検証します。
    def test_round_trip(self, container):
        binary = decode_shader(container)
        assert binary == ShaderBinary(tuple(INSTRUCTIONS), tuple(PATTERNS), 2, ShaderType.VERTEX)

    def test_empty_program(self):
        binary = decode_shader(encode_shader([], [], 0))
        assert binary.instructions == ()
        assert binary.swizzle_patterns == ()
        assert binary.main_offset == 0

    def test_geometry_shader(self):
        binary = decode_shader(encode_shader([0x88000000], [], 0, ShaderType.GEOMETRY))
        assert binary.shader_type is ShaderType.GEOMETRY

    def test_accepts_bytearray(self, container):
        assert decode_shader(bytearray(container)).instructions == tuple(INSTRUCTIONS)

    # @intent:test_case_magic 3つのマジックワードのいずれかが壊れていれば拒否することを検証します。
    @pytest.mark.parametrize("offset", [0, 12, 40])
    def test_bad_magic(self, container, offset):
        corrupted = bytearray(container)
        corrupted[offset] ^= 0xFF
        with pytest.raises(MalformedContainerError):
            decode_shader(bytes(corrupted))

    @pytest.mark.parametrize("length", [0, 4, 11, 30, 60, 103, 110])
    def test_truncated(self, container, length):
        with pytest.raises(MalformedContainerError):
            decode_shader(container[:length])

    def test_truncated_swizzle_table(self, container):
        with pytest.raises(MalformedContainerError, match="Swizzle table"):
            decode_shader(container[:-1])

    def test_binary_size_exceeds_buffer(self, container):
        corrupted = bytearray(container)
        struct.pack_into("<I", corrupted, 12 + 12, 0x10000)
        with pytest.raises(MalformedContainerError, match="Shader binary"):
            decode_shader(bytes(corrupted))

    def test_dvle_offset_exceeds_buffer(self, container):
        corrupted = bytearray(container)
        struct.pack_into("<I", corrupted, 8, len(container))
        with pytest.raises(MalformedContainerError, match="DVLE header"):
            decode_shader(bytes(corrupted))

    def test_unknown_shader_type(self, container):
        corrupted = bytearray(container)
        corrupted[46] = 7
        with pytest.raises(MalformedContainerError, match="Unknown shader type 7"):
            decode_shader(bytes(corrupted))

    def test_missing_program_index(self, container):
        with pytest.raises(MalformedContainerError, match="Program index 1"):
            decode_shader(container, program_index=1)

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            decode_shader(b"XXXX")
