# src/pica_shader_tracer/transport/registers.py
"""
GPU のメモリマップドレジスタ定義。

トレース結果をレジスタ名付きで表示するために使用します。
"""
from enum import IntEnum

# @intent:responsibility 既知のGPUレジスタの物理アドレスを定義します。
class GpuRegisterId(IntEnum):
    FRAMEBUFFER_TOP_LEFT_1 = 0x1EF00468     # Main LCD, first framebuffer for 3D left
    FRAMEBUFFER_TOP_LEFT_2 = 0x1EF0046C     # Main LCD, second framebuffer for 3D left
    FRAMEBUFFER_TOP_RIGHT_1 = 0x1EF00494    # Main LCD, first framebuffer for 3D right
    FRAMEBUFFER_TOP_RIGHT_2 = 0x1EF00498    # Main LCD, second framebuffer for 3D right
    FRAMEBUFFER_SUB_LEFT_1 = 0x1EF00568     # Sub LCD, first framebuffer
    FRAMEBUFFER_SUB_LEFT_2 = 0x1EF0056C     # Sub LCD, second framebuffer
    FRAMEBUFFER_SUB_RIGHT_1 = 0x1EF00594    # Sub LCD, unused first framebuffer
    FRAMEBUFFER_SUB_RIGHT_2 = 0x1EF00598    # Sub LCD, unused second framebuffer

    COMMAND_LIST_SIZE = 0x1EF018E0
    COMMAND_LIST_ADDRESS = 0x1EF018E8
    PROCESS_COMMAND_LIST = 0x1EF018F0

_KNOWN_IDS = {member.value for member in GpuRegisterId}

def register_name(register_id: int) -> str:
    """
    既知のレジスタであればその名前を、そうでなければ 0x%08X 形式のアドレス文字列を返します。
    """
    if register_id in _KNOWN_IDS:
        return GpuRegisterId(register_id).name
    return f"0x{register_id:08X}"
