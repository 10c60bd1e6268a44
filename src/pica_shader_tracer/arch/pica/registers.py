# src/pica_shader_tracer/arch/pica/registers.py
"""
PICA200 頂点シェーダのレジスタ参照モデル。

命令ワードから取り出した生のレジスタ番号を、レジスタ種別とインデックスに分解し、
表示名（v0, r3, c12 など）を生成する責務を負います。
"""
from dataclasses import dataclass
from enum import Enum

# @intent:responsibility レジスタ種別と表示用プレフィックスを定義します。
class RegisterType(Enum):
    INPUT = "v"
    OUTPUT = "o"
    TEMPORARY = "r"
    FLOAT_UNIFORM = "c"
    ADDRESS = "a"

# 生のレジスタ番号の区切り
INPUT_LIMIT = 0x10
TEMPORARY_LIMIT = 0x20

_ADDRESS_PREFIX = RegisterType.ADDRESS.value

# @intent:constant MOVA の書き込み先として表示する合成レジスタ名。
ADDRESS_REGISTER_DEST = f"{_ADDRESS_PREFIX}0"

# @intent:constant 相対アドレッシングのインデックス (0..3) と表示名の対応。0 は相対アドレッシングなし。
_ADDRESS_REGISTER_NAMES = ("", f"{_ADDRESS_PREFIX}0.x", f"{_ADDRESS_PREFIX}0.y", f"{_ADDRESS_PREFIX}L")

# @intent:responsibility 相対アドレッシングに使用されるアドレスレジスタ名を返します。
def address_register_name(index: int) -> str:
    if not 0 <= index < len(_ADDRESS_REGISTER_NAMES):
        raise ValueError(f"Invalid address register index {index}.")
    return _ADDRESS_REGISTER_NAMES[index]


@dataclass(frozen=True)
class SourceRegister:
    """
    ソースオペランドとして参照されるレジスタ。
    """
    register_type: RegisterType
    index: int

    # @intent:responsibility 生のレジスタ番号（最大7bit）から種別とインデックスを決定します。
    @classmethod
    def from_raw(cls, value: int) -> "SourceRegister":
        if value < INPUT_LIMIT:
            return cls(RegisterType.INPUT, value)
        if value < TEMPORARY_LIMIT:
            return cls(RegisterType.TEMPORARY, value - INPUT_LIMIT)
        return cls(RegisterType.FLOAT_UNIFORM, value - TEMPORARY_LIMIT)

    def get_name(self) -> str:
        return f"{self.register_type.value}{self.index}"


@dataclass(frozen=True)
class DestRegister:
    """
    書き込み先として参照されるレジスタ。出力レジスタかテンポラリのみ。
    """
    register_type: RegisterType
    index: int

    @classmethod
    def from_raw(cls, value: int) -> "DestRegister":
        if value < INPUT_LIMIT:
            return cls(RegisterType.OUTPUT, value)
        return cls(RegisterType.TEMPORARY, value - INPUT_LIMIT)

    def get_name(self) -> str:
        return f"{self.register_type.value}{self.index}"
