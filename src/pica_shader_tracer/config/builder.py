from dataclasses import dataclass

from pica_shader_tracer.core.program import ProgramInfoAggregator
from pica_shader_tracer.debugger.dumper import GeometryDumper, ShaderDumper
from pica_shader_tracer.transport.trace import PicaTracer
from .models import TracerConfig

# @intent:responsibility 起動時に一度だけ構築されるコンポーネント群をまとめて保持します。
# @intent:rationale プロセス全体のシングルトンを持たず、このコンテキストを必要な箇所へ参照で渡します。
@dataclass(frozen=True)
class DebugContext:
    config: TracerConfig
    tracer: PicaTracer
    program: ProgramInfoAggregator
    shader_dumper: ShaderDumper
    geometry_dumper: GeometryDumper

# @intent:responsibility 設定（Config）に基づいて、トレーサ・集約器・ダンパを生成・接続します。
class DebugContextBuilder:
    def build(self, config: TracerConfig) -> DebugContext:
        return DebugContext(
            config=config,
            tracer=PicaTracer(),
            program=ProgramInfoAggregator(entry_label=config.listing.entry_label),
            shader_dumper=ShaderDumper(config.dump),
            geometry_dumper=GeometryDumper(config.dump),
        )
