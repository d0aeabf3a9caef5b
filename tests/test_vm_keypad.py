"""
Keypad and keyboard map tests.
"""

from chip8vm.vm import KEYMAP, Keypad, keys_to_vector


class TestKeypad:

    def test_starts_released(self):
        keypad = Keypad()
        assert keypad.state == 0
        assert keypad.first_down() is None

    def test_set_state_and_is_down(self):
        keypad = Keypad()
        keypad.set_state(0b1000_0001_0000_1011)
        assert [k for k in range(16) if keypad.is_down(k)] == [0, 1, 3, 8, 15]

    def test_state_masked_to_16_bits(self):
        keypad = Keypad()
        keypad.set_state(0x1_0001)
        assert keypad.state == 0x0001

    def test_first_down_scans_from_start_and_wraps(self):
        keypad = Keypad()
        keypad.set_state(keys_to_vector([2, 9]))
        assert keypad.first_down(0) == 2
        assert keypad.first_down(3) == 9
        assert keypad.first_down(10) == 2

    def test_reset(self):
        keypad = Keypad()
        keypad.set_state(0xFFFF)
        keypad.reset()
        assert keypad.state == 0


class TestKeymap:

    def test_covers_all_sixteen_keys(self):
        assert sorted(KEYMAP.values()) == list(range(16))

    def test_qwerty_layout(self):
        assert KEYMAP["1"] == 0x1
        assert KEYMAP["4"] == 0xC
        assert KEYMAP["q"] == 0x4
        assert KEYMAP["x"] == 0x0
        assert KEYMAP["v"] == 0xF

    def test_keys_to_vector(self):
        assert keys_to_vector([]) == 0
        assert keys_to_vector([0x0, 0x3]) == 0b1001
        assert keys_to_vector([0xF, 0xF]) == 0x8000
