# src/pica_shader_tracer/transport/trace.py
"""
Transport Layer (GPUレジスタ書き込みトレース)

このモジュールは、GPUのコマンドインターフェースに対して発行されたレジスタ書き込みを
時系列順に記録するトレースバッファを提供します。
書き込み側（エミュレートされたハードウェア）と回収側（インスペクタ）が別スレッドで
並行に動作することを前提とします。
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

from pica_shader_tracer.common.errors import AlreadyActiveError, NotActiveError
from pica_shader_tracer.transport.registers import register_name

logger = logging.getLogger(__name__)

# @intent:responsibility 1回のレジスタ書き込みを不変に記録します。
class TraceWrite(NamedTuple):
    register_id: int
    value: int

# @intent:responsibility 1つのトレースセッションで記録された書き込みの並び。
@dataclass
class PicaTrace:
    writes: List[TraceWrite] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.writes)

    def format_lines(self) -> List[str]:
        """
        書き込みごとに "レジスタ名 = 値" 形式の行を返します。
        """
        return [f"{register_name(w.register_id)} = 0x{w.value:08X}" for w in self.writes]


# @intent:responsibility トレースセッションの開始・記録・終了を管理します。
# @intent:rationale セッションの有無そのものを状態とし（None == Idle）、単一のロックで保護します。
#                  ロック外の is_tracing 判定は、アイドル時にロック取得を省くための近道に過ぎず、
#                  追記の可否はロック取得後に改めて判定します。
class PicaTracer:
    """
    同時に高々1つのトレースセッションを保持するトレースバッファ。
    """
    def __init__(self):
        self._lock = threading.Lock()
        self._trace: Optional[PicaTrace] = None

    @property
    def is_tracing(self) -> bool:
        return self._trace is not None

    def start(self) -> None:
        """
        新しい空のセッションを開始します。既にセッションがある場合は AlreadyActiveError を送出し、
        既存のセッションには手を触れません。
        """
        with self._lock:
            if self._trace is not None:
                logger.warning("Trace start requested while a trace session is already running")
                raise AlreadyActiveError("Tracing is already active.")
            self._trace = PicaTrace()
        logger.debug("Trace session started")

    def record(self, register_id: int, value: int) -> None:
        """
        セッションがアクティブな場合のみ書き込みを追記します。アイドル時は何もしません。
        """
        if self._trace is None:
            return

        with self._lock:
            trace = self._trace
            if trace is None:
                return
            trace.writes.append(TraceWrite(register_id, value))

    # @intent:responsibility ハードウェアレジスタ側から通知される書き込みイベントの受け口。
    def notify_register_write(self, register_id: int, value: int) -> None:
        self.record(register_id, value)

    def finish(self) -> PicaTrace:
        """
        セッションを終了し、記録された書き込みの所有権を呼び出し側へ渡します。
        セッションが無い場合は NotActiveError を送出します。
        """
        with self._lock:
            trace = self._trace
            if trace is None:
                logger.warning("Trace finish requested while no trace session is running")
                raise NotActiveError("Tracing is not active.")
            self._trace = None
        logger.debug("Trace session finished with %d writes", len(trace))
        return trace
