# src/pica_shader_tracer/common/errors.py
"""
共通の例外定義を提供するモジュール。
組み込み例外を基底にすることで、呼び出し側は IndexError / ValueError として扱うこともできます。
"""

# @intent:responsibility テーブル（デスクリプタ、命令列、ラベル）の範囲外参照を表します。
class OutOfRangeError(IndexError):
    pass

# @intent:responsibility マジックワード不一致や、ヘッダが宣言する範囲がバッファ外を指すコンテナを表します。
class MalformedContainerError(ValueError):
    pass

# @intent:responsibility トレースセッションのプロトコル違反の基底クラス。
# @intent:rationale 致命的ではなく、既存のセッションはそのまま残ります。
class TraceSessionError(RuntimeError):
    pass

class AlreadyActiveError(TraceSessionError):
    pass

class NotActiveError(TraceSessionError):
    pass
