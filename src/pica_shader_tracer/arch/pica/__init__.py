"""
PICA200 Vertex Shader Architecture Package
"""
from .registers import RegisterType, SourceRegister, DestRegister
from .swizzle import SwizzlePattern
