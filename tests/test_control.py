"""Tests for the parameter store shared by the render loop and HTTP surface."""

import json
import threading

from ledsphere.color.colors import BLACK, RED
from ledsphere.control import ParameterStore


class TestVars:

    def test_unknown_var_reads_zero(self, control):
        assert control.get_var("nope") == 0.0

    def test_set_and_get(self, control):
        control.set_var("A", 0.25)
        assert control.get_var("A") == 0.25

    def test_values_stored_as_float(self, control):
        control.set_var("B", 1)
        assert isinstance(control.get_var("B"), float)


class TestColors:

    def test_unknown_color_reads_black(self, control):
        assert control.get_color("nope") == BLACK
        assert control.get_color_hex("nope") == ""

    def test_set_color_stores_hex(self, control):
        control.set_color("A", RED)
        assert control.get_color_hex("A") == "ff0000"
        assert control.get_color("A") == RED

    def test_hash_prefix_dropped(self, control):
        control.set_color_hex("C", "#00ff80")
        assert control.get_color_hex("C") == "00ff80"
        assert control.get_color("C") == (0.0, 1.0, 128 / 255)

    def test_malformed_hex_reads_black(self, control, capsys):
        control.set_color_hex("D", "zzz")
        assert control.get_color("D") == BLACK
        assert "[Control] Bad color" in capsys.readouterr().err


class TestState:
    """JSON snapshot and reload."""

    def test_snapshot_shape(self, control):
        control.set_var("A", 0.5)
        control.set_color("A", RED)
        assert json.loads(control.state()) == {"Vars": {"A": 0.5}, "Colors": {"A": "ff0000"}}

    def test_load_round_trip(self, control):
        control.set_var("brightness", 0.4)
        control.set_color_hex("B", "123456")
        other = ParameterStore()
        other.load(control.state())
        assert other.get_var("brightness") == 0.4
        assert other.get_color_hex("B") == "123456"

    def test_load_merges(self, control):
        control.set_var("keep", 1.0)
        control.load(json.dumps({"Vars": {"new": 2.0}}))
        assert control.get_var("keep") == 1.0
        assert control.get_var("new") == 2.0


def test_concurrent_writers_and_readers(control):
    errors = []

    def writer(n):
        for i in range(500):
            control.set_var(f"v{n}", i)
            control.set_color_hex(f"c{n}", f"{i % 256:02x}0000")

    def reader():
        for _ in range(500):
            try:
                json.loads(control.state())
            except ValueError as e:
                errors.append(e)

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
    threads += [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert all(control.get_var(f"v{n}") == 499.0 for n in range(4))
