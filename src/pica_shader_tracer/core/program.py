# src/pica_shader_tracer/core/program.py
"""
Core Layer (プログラム情報)

このモジュールは、デコード対象のシェーダプログラム全体（命令列、デスクリプタテーブル、ラベル表）を
保持し、表示層へ読み取り専用の問い合わせ手段を提供する責務を負います。
"""
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

from pica_shader_tracer.arch.pica.instructions import Instruction
from pica_shader_tracer.arch.pica.swizzle import SwizzlePattern
from pica_shader_tracer.common.errors import OutOfRangeError
from pica_shader_tracer.common.types import WordSource

logger = logging.getLogger(__name__)

DEFAULT_ENTRY_LABEL = "main"

# @intent:responsibility ある時点のプログラム全体を不変に記録します。
@dataclass(frozen=True)
class ProgramInfo:
    """
    命令列（インデックス = 命令単位のオフセット）、デスクリプタテーブル（インデックス = デスクリプタID）、
    およびオフセットからラベル名へのマップを保持する不変のデータ構造。
    """
    code: Tuple[Instruction, ...] = ()
    swizzle_info: Tuple[SwizzlePattern, ...] = ()
    labels: Mapping[int, str] = field(default_factory=lambda: MappingProxyType({}))

    def count(self) -> int:
        return len(self.code)

    def instruction_at(self, index: int) -> Instruction:
        if not 0 <= index < len(self.code):
            raise OutOfRangeError(f"Instruction offset {index} out of range for program of {len(self.code)} instructions.")
        return self.code[index]

    def has_label_at(self, offset: int) -> bool:
        return offset in self.labels

    def label_at(self, offset: int) -> str:
        if offset not in self.labels:
            raise OutOfRangeError(f"No label bound to offset {offset}.")
        return self.labels[offset]


# @intent:responsibility 外部のシェーダメモリからProgramInfoを丸ごと再構築し、問い合わせに応答します。
# @intent:rationale 再構築は新しいProgramInfoを組み立ててから参照を差し替えるため、
#                  問い合わせ側が構築途中の状態を観測することはありません。
class ProgramInfoAggregator:
    """
    最新の rebuild() で完成したプログラム情報のみを公開する集約クラス。
    rebuild() は単一の調整スレッドから呼び出される前提です。
    """
    def __init__(self, entry_label: str = DEFAULT_ENTRY_LABEL):
        self._entry_label = entry_label
        self._info = ProgramInfo()

    def rebuild(self, instruction_source: WordSource, swizzle_source: WordSource, entry_point_offset: int) -> ProgramInfo:
        """
        以前の内容を破棄し、命令メモリとデスクリプタメモリの全ワードから再構築します。
        エントリポイントには entry_label（既定では "main"）を割り当てます。
        """
        if entry_point_offset < 0:
            raise ValueError(f"Entry point offset must be non-negative, got {entry_point_offset}.")

        info = ProgramInfo(
            code=tuple(Instruction(word) for word in instruction_source),
            swizzle_info=tuple(SwizzlePattern.from_word(word) for word in swizzle_source),
            labels=MappingProxyType({entry_point_offset: self._entry_label}),
        )
        self._info = info
        logger.debug("Rebuilt program info: %d instructions, %d swizzle patterns, entry at %d",
                     info.count(), len(info.swizzle_info), entry_point_offset)
        return info

    @property
    def info(self) -> ProgramInfo:
        return self._info

    def count(self) -> int:
        return self._info.count()

    def instruction_at(self, index: int) -> Instruction:
        return self._info.instruction_at(index)

    def swizzle_table(self) -> Tuple[SwizzlePattern, ...]:
        return self._info.swizzle_info

    def has_label_at(self, offset: int) -> bool:
        return self._info.has_label_at(offset)

    def label_at(self, offset: int) -> str:
        return self._info.label_at(offset)
