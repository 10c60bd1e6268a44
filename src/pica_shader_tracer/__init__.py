"""
pica_shader_tracer: PICA200 頂点シェーダの逆アセンブル、シェーダコンテナの入出力、
およびGPUレジスタ書き込みトレースを提供するパッケージ。
"""
__version__ = "0.1.0"
