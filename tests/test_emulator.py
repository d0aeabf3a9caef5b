"""
Emulator Host Loop Tests
========================

Tests for the Emulator class, covering:
- Configuration validation
- Program loading
- Input delivery and the exit request
- Timer ticking against the master clock
- Display and audio pushes
- Cycle pacing (sleep durations)
- Error propagation

All tests run on a simulated clock; nothing actually sleeps.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging

import pytest

from chip8vm.errors import RomSizeError, StackUnderflowError
from chip8vm.vm import Emulator, EmulatorConfig, Signal


# =============================================================================
# Mock Devices
# =============================================================================

class ScriptedInput:
    """
    Input device that replays a script, then requests exit.

    Each script entry is either None (nothing happened) or a key vector
    (reported as NEW_INPUTS). Optionally advances a clock on every poll to
    simulate time spent in the cycle.
    """

    def __init__(self, script=(), clock=None, cost=0.0):
        self._script = list(script)
        self._clock = clock
        self._cost = cost
        self._keys = 0
        self.polls = 0

    def handle_inputs(self) -> Signal:
        self.polls += 1
        if self._clock is not None:
            self._clock.advance(self._cost)
        if not self._script:
            return Signal.PROGRAM_EXIT
        entry = self._script.pop(0)
        if entry is None:
            return Signal.NONE
        self._keys = entry
        return Signal.NEW_INPUTS

    def send_inputs(self):
        return self._keys


def idle(cycles, clock=None, cost=0.0):
    """Input device that reports nothing for `cycles` polls, then exits."""
    return ScriptedInput([None] * cycles, clock=clock, cost=cost)


class RecordingDisplay:

    def __init__(self):
        self.frames = []
        self.presented = 0

    def receive_frame(self, frame: bytes) -> None:
        self.frames.append(frame)

    def drive_display(self) -> None:
        self.presented += 1


class RecordingAudio:

    def __init__(self):
        self.signals = []
        self.played = 0

    def receive_signal(self, on: bool) -> None:
        self.signals.append(on)

    def play_sound(self) -> None:
        self.played += 1


@pytest.fixture
def make_emulator(fake_clock, rom):
    """Build an emulator on the fake clock with `words` loaded."""
    def _make(*words, input_device=None, display=None, audio=None, **config):
        config.setdefault("seed", 1)
        emu = Emulator(
            EmulatorConfig(**config),
            input_device=input_device,
            display=display,
            audio=audio,
            clock=fake_clock,
            sleep=fake_clock.sleep,
        )
        emu.load_rom(rom(*words))
        return emu
    return _make


# =============================================================================
# Configuration
# =============================================================================

class TestEmulatorConfig:

    def test_defaults(self):
        config = EmulatorConfig()
        assert config.clock_hz == 720
        assert config.timer_hz == 60
        assert config.trace is False
        assert config.seed is None

    @pytest.mark.parametrize("clock_hz", [1, 500, 2000])
    def test_valid_clock(self, clock_hz):
        assert EmulatorConfig(clock_hz=clock_hz).clock_hz == clock_hz

    @pytest.mark.parametrize("clock_hz", [0, 0.5, 2001, -720])
    def test_invalid_clock(self, clock_hz):
        with pytest.raises(ValueError):
            EmulatorConfig(clock_hz=clock_hz)

    def test_invalid_timer_rate(self):
        with pytest.raises(ValueError):
            EmulatorConfig(timer_hz=0)

    def test_set_clock_speed(self, make_emulator):
        emu = make_emulator(0x1200)
        emu.set_clock_speed(500)
        assert emu.config.clock_hz == 500
        with pytest.raises(ValueError):
            emu.set_clock_speed(3000)
        assert emu.config.clock_hz == 500


# =============================================================================
# Program Loading
# =============================================================================

class TestLoading:

    def test_load_program(self, tmp_path, rom):
        path = tmp_path / "add.ch8"
        path.write_bytes(rom(0x6005, 0x7005, 0x1204))
        emu = Emulator()
        emu.load_program(path)
        assert emu.run_cycles(3) == 3
        assert emu.registers["v0"] == 0x0A

    def test_load_program_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Emulator().load_program(tmp_path / "missing.ch8")

    def test_load_program_too_large(self, tmp_path):
        path = tmp_path / "big.ch8"
        path.write_bytes(bytes(3585))
        with pytest.raises(RomSizeError):
            Emulator().load_program(path)


# =============================================================================
# Headless Execution
# =============================================================================

class TestHeadless:
    """Runs with the default null devices."""

    def test_run_cycles(self, make_emulator):
        emu = make_emulator(0x6005, 0x7005, 0x1204)
        assert emu.run_cycles(10) == 10
        assert emu.cycles == 10
        assert emu.vm.pc == 0x204
        assert emu.registers["v0"] == 0x0A

    def test_registers_snapshot(self, make_emulator):
        emu = make_emulator(0x6A12, 0xA345, 0x2300)
        emu.run_cycles(3)
        regs = emu.registers
        assert regs["va"] == 0x12
        assert regs["i"] == 0x345
        assert regs["pc"] == 0x300
        assert regs["sp"] == 1
        assert regs["dt"] == 0
        assert regs["st"] == 0

    def test_reset(self, make_emulator):
        emu = make_emulator(0x6005, 0x1202)
        emu.run_cycles(4)
        emu.reset()
        assert emu.cycles == 0
        assert emu.vm.pc == 0x200
        assert emu.registers["v0"] == 0

    def test_repr(self, make_emulator):
        emu = make_emulator(0x1200)
        assert repr(emu) == "Emulator(clock=720Hz, pc=$0200, cycles=0)"


# =============================================================================
# Input and Exit
# =============================================================================

class TestInput:

    def test_exit_before_first_instruction(self, make_emulator, fake_clock):
        emu = make_emulator(0x6005, input_device=ScriptedInput())
        assert emu.run() == 0
        assert emu.vm.pc == 0x200
        assert fake_clock.sleeps == []
        assert not emu.is_running

    def test_exit_ends_run(self, make_emulator):
        emu = make_emulator(0x7001, 0x1200, input_device=idle(7))
        assert emu.run() == 7
        assert emu.registers["v0"] == 4

    def test_step_reports_exit(self, make_emulator):
        emu = make_emulator(0x1200, input_device=ScriptedInput())
        assert emu.step() & Signal.PROGRAM_EXIT
        assert emu.cycles == 0

    def test_keys_delivered(self, make_emulator):
        emu = make_emulator(0xF30A, input_device=ScriptedInput([1 << 5]))
        signals = emu.step()
        assert signals & Signal.NEW_INPUTS
        assert emu.registers["v3"] == 5
        assert emu.vm.pc == 0x202

    def test_key_wait_spins_until_key(self, make_emulator):
        device = ScriptedInput([None, None, None, 1 << 0xA])
        emu = make_emulator(0xF20A, 0x1202, input_device=device)
        for _ in range(3):
            emu.step()
            assert emu.vm.pc == 0x200
            assert emu.vm.awaiting_key
        emu.step()
        assert emu.registers["v2"] == 0xA
        assert emu.vm.pc == 0x202
        assert emu.cycles == 4

    def test_keys_kept_without_new_inputs(self, make_emulator):
        device = ScriptedInput([1 << 3, None])
        emu = make_emulator(0x1200, input_device=device)
        emu.step()
        emu.step()
        assert emu.vm.keypad.state == 1 << 3


# =============================================================================
# Timers
# =============================================================================

class TestTimers:
    """Timers follow the master clock, not the instruction count."""

    def test_delay_reaches_zero_after_five_periods(self, make_emulator, fake_clock):
        emu = make_emulator(0x6005, 0xF015, 0x1204, input_device=idle(200))
        emu.run(max_cycles=2)
        assert emu.registers["dt"] == 5

        # Ticks fall every 12 cycles at 720 Hz
        emu.run(max_cycles=30)
        assert emu.registers["dt"] == 3

        emu.run(max_cycles=100)
        assert emu.registers["dt"] == 0

    def test_timer_independent_of_clock_rate(self, make_emulator, fake_clock):
        emu = make_emulator(
            0x6005, 0xF015, 0x1204, input_device=idle(1000), clock_hz=2000,
        )
        emu.run(max_cycles=2)
        # 100 cycles at 2000 Hz span just under three timer periods
        emu.run(max_cycles=100)
        assert emu.registers["dt"] == 3

    def test_slow_loop_catches_up(self, make_emulator, fake_clock):
        # Every cycle costs three timer periods
        device = idle(10, clock=fake_clock, cost=0.05)
        emu = make_emulator(0x600A, 0xF015, 0x1204, input_device=device)
        emu.run_cycles(2)
        assert emu.registers["dt"] == 7

    def test_no_ticks_without_time_passing(self, make_emulator, fake_clock):
        emu = make_emulator(0x6005, 0xF015, 0x1204, input_device=idle(100))
        emu.run_cycles(100)
        assert emu.registers["dt"] == 5


# =============================================================================
# Display and Audio
# =============================================================================

class TestOutputs:

    def test_frame_pushed_after_draw(self, make_emulator):
        display = RecordingDisplay()
        emu = make_emulator(
            0xA000, 0xD005, 0x1204, input_device=idle(5), display=display,
        )
        emu.run_cycles(5)
        assert len(display.frames) == 1
        assert display.presented == 1
        assert display.frames[0] == emu.vm.transmit_frame()
        assert any(display.frames[0])

    def test_frame_pushed_after_clear(self, make_emulator):
        display = RecordingDisplay()
        emu = make_emulator(0x00E0, 0x1202, input_device=idle(3), display=display)
        emu.run_cycles(3)
        assert display.frames == [bytes(2048)]

    def test_tone_on_and_off(self, make_emulator, fake_clock):
        audio = RecordingAudio()
        device = idle(10, clock=fake_clock, cost=1 / 60)
        emu = make_emulator(0x6002, 0xF018, 0x1204, input_device=device, audio=audio)
        emu.run_cycles(10)
        assert audio.signals == [True, False]
        assert audio.played == 2
        assert emu.tone is False

    def test_short_tone_heard_when_ticks_catch_up(self, make_emulator):
        # At 30 Hz each cycle spans two timer ticks, so ST=2 ends in the
        # same cycle that Fx18 starts it.
        audio = RecordingAudio()
        emu = make_emulator(0x6002, 0xF018, 0x1204, audio=audio, clock_hz=30)
        emu.run(max_cycles=6)
        assert audio.signals == [True, False]
        assert audio.played == 2
        assert emu.vm.timers.sound == 0

    def test_short_tone_reported_by_step(self, make_emulator, fake_clock):
        audio = RecordingAudio()
        emu = make_emulator(0x6001, 0xF018, 0x1204, audio=audio)
        emu.step()
        fake_clock.advance(1 / 60)
        signals = emu.step()
        assert signals & Signal.SOUND_AUDIO
        assert audio.signals == [True, False]
        assert emu.tone is False

    def test_tone_silenced_when_run_ends(self, make_emulator):
        audio = RecordingAudio()
        emu = make_emulator(0x60FF, 0xF018, 0x1204, audio=audio)
        emu.run(max_cycles=3)
        assert emu.vm.timers.sound > 0
        assert audio.signals == [True, False]
        assert emu.tone is False

    def test_tone_resumes_on_next_run(self, make_emulator):
        audio = RecordingAudio()
        emu = make_emulator(0x60FF, 0xF018, 0x1204, audio=audio)
        emu.run(max_cycles=3)
        emu.run(max_cycles=1)
        assert audio.signals == [True, False, True, False]

    def test_reset_silences_tone(self, make_emulator):
        audio = RecordingAudio()
        emu = make_emulator(0x60FF, 0xF018, 0x1204, audio=audio)
        emu.run_cycles(2)
        assert audio.signals == [True]
        emu.reset()
        assert audio.signals == [True, False]
        assert emu.tone is False

    def test_reset_without_tone_is_quiet(self, make_emulator):
        audio = RecordingAudio()
        emu = make_emulator(0x1200, audio=audio)
        emu.run_cycles(2)
        emu.reset()
        assert audio.signals == []

    def test_no_audio_push_without_change(self, make_emulator):
        audio = RecordingAudio()
        emu = make_emulator(0x6001, 0x1202, input_device=idle(5), audio=audio)
        emu.run_cycles(5)
        assert audio.signals == []


# =============================================================================
# Pacing
# =============================================================================

class TestPacing:

    def test_sleeps_one_period_when_cycle_is_free(self, make_emulator, fake_clock):
        emu = make_emulator(0x1200, input_device=idle(5))
        emu.run()
        assert len(fake_clock.sleeps) == 5
        assert all(s == pytest.approx(1 / 720) for s in fake_clock.sleeps)

    def test_sleep_shortened_by_time_spent(self, make_emulator, fake_clock):
        device = idle(3, clock=fake_clock, cost=0.001)
        emu = make_emulator(0x1200, input_device=device, clock_hz=100)
        emu.run()
        assert all(s == pytest.approx(0.009) for s in fake_clock.sleeps)

    def test_sleep_never_negative(self, make_emulator, fake_clock):
        device = idle(3, clock=fake_clock, cost=0.5)
        emu = make_emulator(0x1200, input_device=device)
        emu.run()
        assert fake_clock.sleeps == [0.0, 0.0, 0.0]

    def test_run_cycles_does_not_sleep(self, make_emulator, fake_clock):
        emu = make_emulator(0x1200, input_device=idle(5))
        emu.run_cycles(5)
        assert fake_clock.sleeps == []


# =============================================================================
# Errors and Tracing
# =============================================================================

class TestErrorsAndTrace:

    def test_program_error_propagates(self, make_emulator):
        emu = make_emulator(0x00EE, input_device=idle(5))
        with pytest.raises(StackUnderflowError):
            emu.run()
        assert not emu.is_running

    def test_trace_logs_disassembly(self, make_emulator, caplog):
        emu = make_emulator(0x6005, 0x1202, input_device=idle(2), trace=True)
        with caplog.at_level(logging.DEBUG, logger="chip8vm.vm.emulator"):
            emu.run_cycles(2)
        assert "0200: 6005 LD V0, #$05" in caplog.text
        assert "0202: 1202 JP $202" in caplog.text

    def test_no_trace_by_default(self, make_emulator, caplog):
        emu = make_emulator(0x6005, 0x1202, input_device=idle(2))
        with caplog.at_level(logging.DEBUG, logger="chip8vm.vm.emulator"):
            emu.run_cycles(2)
        assert "LD V0" not in caplog.text
