"""
PICA200 頂点シェーダ命令セット定義パッケージ。
"""
from .base import Instruction, CompareOp
from .maps import OPCODE_MAP, OpcodeClass, OpcodeFlags, OpcodeInfo, get_opcode_info
