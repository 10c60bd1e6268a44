# src/pica_shader_tracer/debugger/dumper.py
"""
デバッグ用ダンプモジュール。

現在のシェーダプログラムをシェーダコンテナ形式で、描画されたジオメトリを
Wavefront OBJ 形式でファイルに書き出す責務を負います。
"""
import logging
import os
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Optional, Sequence, Tuple

from pica_shader_tracer.config.models import DumpConfig
from pica_shader_tracer.loader.container import ShaderType, encode_shader

logger = logging.getLogger(__name__)

# @intent:responsibility プリミティブの組み立て方式を定義します。
class TriangleTopology(IntEnum):
    LIST = 0
    STRIP = 1
    FAN = 2
    LIST_INDEXED = 3

@dataclass(frozen=True)
class Vertex:
    x: float
    y: float
    z: float

@dataclass(frozen=True)
class Face:
    # 0始まりの頂点インデックス
    indices: Tuple[int, int, int]


# @intent:responsibility 連番付きのダンプファイル名を生成し、バイト列を書き出します。
# @intent:rationale 連番はインスタンスごとに保持し、プロセス全体で共有される状態を持ちません。
class _NumberedFileWriter:
    def __init__(self, config: DumpConfig, prefix: str, extension: str):
        self._config = config
        self._prefix = prefix
        self._extension = extension
        self._index = 0

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def write(self, data: bytes) -> Optional[str]:
        if not self._config.enabled:
            return None
        os.makedirs(self._config.directory, exist_ok=True)
        path = os.path.join(self._config.directory, f"{self._prefix}{self._index + 1}{self._extension}")
        with open(path, "wb") as f:
            f.write(data)
        # 書き込みに成功した場合のみ連番を進める
        self._index += 1
        logger.debug("Wrote %d bytes to %s", len(data), path)
        return path


class GeometryDumper:
    """
    頂点を蓄積し、三角形リストとして OBJ 形式で書き出すダンパ。
    """
    def __init__(self, config: Optional[DumpConfig] = None):
        config = config or DumpConfig()
        self._writer = _NumberedFileWriter(config, config.geometry_prefix, ".obj")
        self.vertices: List[Vertex] = []
        self.faces: List[Face] = []

    def add_vertex(self, pos: Sequence[float], topology: TriangleTopology) -> None:
        """
        頂点を追加します。3頂点ごとに1つの面を構成します。
        LIST / LIST_INDEXED 以外のトポロジは未対応で ValueError を送出します。
        """
        if topology not in (TriangleTopology.LIST, TriangleTopology.LIST_INDEXED):
            raise ValueError(f"Unknown triangle topology {int(topology):#x}")
        x, y, z = pos
        self.vertices.append(Vertex(float(x), float(y), float(z)))

        num_vertices = len(self.vertices)
        if num_vertices % 3 == 0:
            self.faces.append(Face((num_vertices - 3, num_vertices - 2, num_vertices - 1)))

    def to_obj(self) -> str:
        lines = [f"v {v.x} {v.y} {v.z}" for v in self.vertices]
        # OBJ のインデックスは1始まり
        lines += [f"f {a + 1} {b + 1} {c + 1}" for a, b, c in (face.indices for face in self.faces)]
        return "".join(line + "\n" for line in lines)

    def dump(self) -> Optional[str]:
        return self._writer.write(self.to_obj().encode("ascii"))


class ShaderDumper:
    """
    シェーダプログラムをコンテナ形式で連番ファイルに書き出すダンパ。
    """
    def __init__(self, config: Optional[DumpConfig] = None):
        config = config or DumpConfig()
        self._writer = _NumberedFileWriter(config, config.shader_prefix, ".shbin")

    def dump_shader(self, instructions: Iterable[int], swizzle_patterns: Iterable[int], main_offset: int,
                    shader_type: ShaderType = ShaderType.VERTEX) -> Optional[str]:
        """
        ダンプが有効な場合にコンテナを書き出し、そのパスを返します。無効な場合は None を返します。
        """
        if not self._writer.enabled:
            return None
        data = encode_shader(instructions, swizzle_patterns, main_offset, shader_type)
        return self._writer.write(data)
