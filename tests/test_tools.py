"""Disassembler, command line and frontend frame loop tests."""
import pytest

from chip8 import load
from chip8.__main__ import build_parser, main
from chip8.disassembler import disassemble, format_listing
from chip8.memory import MAX_PROGRAM_SIZE


def program(*opcodes):
    return b"".join(opcode.to_bytes(2, "big") for opcode in opcodes)


class TestDisassembler:

    def test_mnemonics(self):
        data = program(0x00E0, 0xA22A, 0x6A02, 0xDAB6, 0x8124, 0x00C3, 0xF065, 0x0123)
        assert [text for _, _, text in disassemble(data)] == [
            "CLS",
            "LD I, 0x22A",
            "LD VA, 0x02",
            "DRW VA, VB, 6",
            "ADD V1, V2",
            "SCD 3",
            "LD V0, [I]",
            "DW 0x0123",
        ]

    def test_addresses(self):
        addresses = [address for address, _, _ in disassemble(program(0x1200, 0x1202), origin=0x300)]
        assert addresses == [0x300, 0x302]

    def test_odd_length(self):
        assert list(disassemble(b"\x12")) == [(0x200, 0x1200, "JP 0x200")]

    def test_listing(self):
        assert format_listing(program(0x00EE, 0x2345)) == "0x200 | 0x00EE | RET\n0x202 | 0x2345 | CALL 0x345"


class TestCommandLine:

    def test_quirk_flags(self):
        args = build_parser().parse_args(["game.ch8", "--quirk-shift", "--quirk-memory"])
        assert args.quirks == ["quirk-shift", "quirk-memory"]
        assert args.ips == 700

    def test_no_quirks(self):
        assert build_parser().parse_args(["game.ch8"]).quirks == []

    def test_disassemble(self, tmp_path, capsys):
        rom = tmp_path / "game.ch8"
        rom.write_bytes(program(0x00E0, 0x1200))
        assert main([str(rom), "--disassemble"]) == 0
        assert capsys.readouterr().out.splitlines() == ["0x200 | 0x00E0 | CLS", "0x202 | 0x1200 | JP 0x200"]

    def test_rom_too_large(self, tmp_path):
        rom = tmp_path / "huge.ch8"
        rom.write_bytes(bytes(MAX_PROGRAM_SIZE + 1))
        assert main([str(rom)]) == 1


class TestFrontend:

    @pytest.fixture
    def frontend(self):
        frontend_module = pytest.importorskip("chip8.frontend")
        return frontend_module

    def test_frame_runs_steps_then_ticks(self, frontend):
        vm = load(program(0x6A05, 0xFA15, 0x7B01, 0x1204))
        frontend.Frontend(vm, frontend.FrontendConfig(ips=600, timer_hz=60)).run_frame()
        assert vm.timers.get_delay() == 4
        assert vm.v[0xB] == 4

    def test_frame_stops_when_blocked(self, frontend):
        vm = load(program(0xF00A, 0x6A05))
        frontend.Frontend(vm).run_frame()
        assert vm.pc == 0x200

    def test_keyboard_layout(self, frontend):
        assert sorted(frontend.KEY_MAPPING.values()) == list(range(16))
