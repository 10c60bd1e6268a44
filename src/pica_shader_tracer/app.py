# src/pica_shader_tracer/app.py
"""
コマンドラインのエントリポイント。
シェーダコンテナを読み込み、オフセット・RAW・逆アセンブルの3列リストを出力します。
"""
import argparse
import logging
import sys
from typing import List, Optional

import yaml

from pica_shader_tracer.arch.pica.disassembler import LISTING_HEADERS, disassemble_program
from pica_shader_tracer.common.errors import OutOfRangeError
from pica_shader_tracer.config.loader import ConfigLoader
from pica_shader_tracer.config.models import MAX_OFFSET_DIGITS, MIN_OFFSET_DIGITS, TracerConfig
from pica_shader_tracer.core.program import ProgramInfoAggregator
from pica_shader_tracer.loader.container import decode_shader

logger = logging.getLogger(__name__)

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pica-shader-tracer", description="Disassemble a PICA200 shader container.")
    parser.add_argument("shader", help="shader container file (.shbin)")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--digits", type=int, help="hex digits of the offset column")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser

# @intent:responsibility コンテナを読み込んでリストを標準出力へ書き出します。
def main(argv: Optional[List[str]] = None) -> int:
    """
    アプリケーションのメイン関数。終了コードを返します。
    """
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        config = ConfigLoader().load_from_file(args.config) if args.config else TracerConfig()
        with open(args.shader, "rb") as f:
            data = f.read()
        binary = decode_shader(data)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    digits = args.digits if args.digits is not None else config.listing.offset_digits
    if not MIN_OFFSET_DIGITS <= digits <= MAX_OFFSET_DIGITS:
        print(f"error: --digits must be between {MIN_OFFSET_DIGITS} and {MAX_OFFSET_DIGITS}: {digits}", file=sys.stderr)
        return 1

    # リスト出力に必要なのはプログラム情報のみ。トレーサとダンパは生成しない
    program = ProgramInfoAggregator(entry_label=config.listing.entry_label)
    program.rebuild(binary.instructions, binary.swizzle_patterns, binary.main_offset)
    logger.debug("Listing %d instructions from %s", program.count(), args.shader)

    try:
        rows = disassemble_program(program.info, digits)
    except OutOfRangeError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    offset_width = max([len(LISTING_HEADERS[0])] + [len(row.offset) for row in rows])
    print(f"{LISTING_HEADERS[0]:<{offset_width}}  {LISTING_HEADERS[1]:<8}  {LISTING_HEADERS[2]}")
    for row in rows:
        print(f"{row.offset:<{offset_width}}  {row.raw}  {row.disassembly}")
    return 0

if __name__ == '__main__':
    sys.exit(main())
