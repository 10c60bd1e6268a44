# tests/debugger/test_dumper.py
"""
シェーダ／ジオメトリダンパの単体テスト。
"""
import os

import pytest

from pica_shader_tracer.config.models import DumpConfig
from pica_shader_tracer.debugger.dumper import Face, GeometryDumper, ShaderDumper, TriangleTopology, Vertex
from pica_shader_tracer.loader.container import ShaderType, decode_shader

@pytest.fixture
def dump_config(tmp_path):
    return DumpConfig(enabled=True, directory=str(tmp_path / "dumps"))

# @intent:test_suite 三角形リストの組み立てと OBJ 出力を検証します。
class TestGeometryDumper:
    def test_faces_every_third_vertex(self):
        dumper = GeometryDumper()
        for pos in ((0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0)):
            dumper.add_vertex(pos, TriangleTopology.LIST)
        assert dumper.vertices[1] == Vertex(1.0, 0.0, 0.0)
        assert dumper.faces == [Face((0, 1, 2))]

    def test_to_obj(self):
        dumper = GeometryDumper()
        dumper.add_vertex((0.0, 0.0, 0.0), TriangleTopology.LIST)
        dumper.add_vertex((1.0, 0.0, 0.5), TriangleTopology.LIST_INDEXED)
        dumper.add_vertex((0.0, 1.0, 0.0), TriangleTopology.LIST)
        assert dumper.to_obj() == (
            "v 0.0 0.0 0.0\n"
            "v 1.0 0.0 0.5\n"
            "v 0.0 1.0 0.0\n"
            "f 1 2 3\n"
        )

    @pytest.mark.parametrize("topology", [TriangleTopology.STRIP, TriangleTopology.FAN])
    def test_unsupported_topology(self, topology):
        dumper = GeometryDumper()
        with pytest.raises(ValueError, match="Unknown triangle topology"):
            dumper.add_vertex((0, 0, 0), topology)
        assert dumper.vertices == []

    def test_dump_disabled(self):
        dumper = GeometryDumper()
        dumper.add_vertex((0, 0, 0), TriangleTopology.LIST)
        assert dumper.dump() is None

    # @intent:test_case_numbered ダンプごとに連番のファイルが作成されることを検証します。
    def test_dump_numbered_files(self, dump_config):
        dumper = GeometryDumper(dump_config)
        for pos in ((0, 0, 0), (1, 0, 0), (0, 1, 0)):
            dumper.add_vertex(pos, TriangleTopology.LIST)
        first = dumper.dump()
        second = dumper.dump()

        assert os.path.basename(first) == "geometry_dump1.obj"
        assert os.path.basename(second) == "geometry_dump2.obj"
        with open(first) as f:
            assert f.read().endswith("f 1 2 3\n")


# @intent:test_suite シェーダのコンテナ形式でのダンプを検証します。
class TestShaderDumper:
    def test_dump_disabled(self, tmp_path):
        dumper = ShaderDumper(DumpConfig(enabled=False, directory=str(tmp_path)))
        assert dumper.dump_shader([0x88000000], [], 0) is None
        assert os.listdir(tmp_path) == []

    def test_dump_is_decodable(self, dump_config):
        dumper = ShaderDumper(dump_config)
        path = dumper.dump_shader([0x02000080, 0x88000000], [0x0016C31E], 1, ShaderType.GEOMETRY)

        assert os.path.basename(path) == "shader_dump1.shbin"
        with open(path, "rb") as f:
            binary = decode_shader(f.read())
        assert binary.instructions == (0x02000080, 0x88000000)
        assert binary.swizzle_patterns == (0x0016C31E,)
        assert binary.main_offset == 1
        assert binary.shader_type is ShaderType.GEOMETRY

    # @intent:test_case_failed_write 書き込みに失敗したダンプは連番を消費しないことを検証します。
    def test_failed_write_keeps_number(self, tmp_path):
        directory = tmp_path / "out"
        directory.write_text("not a directory")
        dumper = ShaderDumper(DumpConfig(enabled=True, directory=str(directory)))
        with pytest.raises(OSError):
            dumper.dump_shader([0x88000000], [], 0)

        directory.unlink()
        path = dumper.dump_shader([0x88000000], [], 0)
        assert os.path.basename(path) == "shader_dump1.shbin"

    def test_custom_prefix(self, tmp_path):
        config = DumpConfig(enabled=True, directory=str(tmp_path), shader_prefix="vs_")
        path = ShaderDumper(config).dump_shader([], [], 0)
        assert os.path.basename(path) == "vs_1.shbin"

    def test_invalid_words_are_not_written(self, dump_config):
        dumper = ShaderDumper(dump_config)
        with pytest.raises(ValueError):
            dumper.dump_shader([0x100000000], [], 0)
        assert not os.path.exists(dump_config.directory)
