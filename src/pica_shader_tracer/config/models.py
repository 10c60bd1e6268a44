# src/pica_shader_tracer/config/models.py
"""
トレーサ全体の設定モデル。
起動時に一度だけ構築され、必要なコンポーネントへ参照で渡されます。
"""
from dataclasses import dataclass, field

# @intent:responsibility シェーダ／ジオメトリのダンプ出力先と有効・無効を定義します。
# @intent:rationale ダンプはディスクを無駄に消費するため、既定では無効です。
@dataclass(frozen=True)
class DumpConfig:
    enabled: bool = False
    directory: str = "."
    shader_prefix: str = "shader_dump"
    geometry_prefix: str = "geometry_dump"

# @intent:constant オフセット列の桁数として受け付ける範囲。32bitのバイトオフセットは最大8桁。
MIN_OFFSET_DIGITS = 1
MAX_OFFSET_DIGITS = 8

# @intent:responsibility 逆アセンブルリストの表示形式を定義します。
@dataclass(frozen=True)
class ListingConfig:
    offset_digits: int = 4
    entry_label: str = "main"

@dataclass(frozen=True)
class TracerConfig:
    dump: DumpConfig = field(default_factory=DumpConfig)
    listing: ListingConfig = field(default_factory=ListingConfig)
