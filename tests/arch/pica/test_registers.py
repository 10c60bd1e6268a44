# tests/arch/pica/test_registers.py
"""
pica_shader_tracer.arch.pica.registersモジュールの単体テスト。
"""
import pytest

from pica_shader_tracer.arch.pica.registers import (
    ADDRESS_REGISTER_DEST,
    DestRegister,
    RegisterType,
    SourceRegister,
    address_register_name,
)

class TestSourceRegister:
    @pytest.mark.parametrize("raw, register_type, name", [
        (0x00, RegisterType.INPUT, "v0"),
        (0x0F, RegisterType.INPUT, "v15"),
        (0x10, RegisterType.TEMPORARY, "r0"),
        (0x1F, RegisterType.TEMPORARY, "r15"),
        (0x20, RegisterType.FLOAT_UNIFORM, "c0"),
        (0x7F, RegisterType.FLOAT_UNIFORM, "c95"),
    ])
    def test_from_raw(self, raw, register_type, name):
        register = SourceRegister.from_raw(raw)
        assert register.register_type == register_type
        assert register.get_name() == name

class TestDestRegister:
    @pytest.mark.parametrize("raw, name", [
        (0x00, "o0"),
        (0x07, "o7"),
        (0x10, "r0"),
        (0x1F, "r15"),
    ])
    def test_from_raw(self, raw, name):
        assert DestRegister.from_raw(raw).get_name() == name

class TestAddressRegisterName:
    # @intent:test_case_relative インデックス0は相対アドレッシングなしを表すことを検証します。
    def test_names(self):
        assert address_register_name(0) == ""
        assert address_register_name(1) == "a0.x"
        assert address_register_name(2) == "a0.y"
        assert address_register_name(3) == "aL"

    def test_invalid_index(self):
        with pytest.raises(ValueError, match="Invalid address register index 4."):
            address_register_name(4)

    # @intent:test_case_prefix アドレスレジスタ名はレジスタ種別のプレフィックスから構成されることを検証します。
    def test_names_use_address_register_type(self):
        assert ADDRESS_REGISTER_DEST == "a0"
        for index in range(1, 4):
            assert address_register_name(index).startswith(RegisterType.ADDRESS.value)
