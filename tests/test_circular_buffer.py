import pytest

from c300sim.circular_buffer import CircularBuffer


def _drain(buf):
    out = []
    while not buf.empty:
        out.append(buf.data_out)
        buf.tick(read_enable=True)
    return out


def test_fifo_order_round_trip():
    buf = CircularBuffer(size=8)
    items = [11, 22, 33, 44]
    for item in items:
        buf.tick(write_enable=True, data_in=item)
    assert len(buf) == len(items)
    assert _drain(buf) == items
    assert buf.empty


def test_full_after_size_writes_and_extra_write_ignored():
    buf = CircularBuffer(size=4)
    for item in range(4):
        buf.tick(write_enable=True, data_in=item)
    assert buf.full
    assert buf.count == 4
    buf.tick(write_enable=True, data_in=99)
    assert buf.count == 4
    assert _drain(buf) == [0, 1, 2, 3]


def test_empty_buffer_outputs_default_and_ignores_reads():
    buf = CircularBuffer(size=4, default="idle")
    assert buf.data_out == "idle"
    buf.tick(read_enable=True)
    assert buf.count == 0
    assert buf.empty


def test_simultaneous_write_and_read_keeps_count():
    buf = CircularBuffer(size=4)
    buf.tick(write_enable=True, data_in="a")
    buf.tick(write_enable=True, read_enable=True, data_in="b")
    assert buf.count == 1
    assert buf.data_out == "b"


def test_wraps_around_storage():
    buf = CircularBuffer(size=3)
    seen = []
    for item in range(10):
        buf.tick(write_enable=True, data_in=item)
        seen.append(buf.data_out)
        buf.tick(read_enable=True)
    assert seen == list(range(10))
    assert buf.empty


def test_full_buffer_with_write_and_read_only_reads():
    buf = CircularBuffer(size=2)
    buf.tick(write_enable=True, data_in="x")
    buf.tick(write_enable=True, data_in="y")
    buf.tick(write_enable=True, read_enable=True, data_in="z")
    assert buf.count == 1
    assert _drain(buf) == ["y"]


def test_reset_clears_contents():
    buf = CircularBuffer(size=4)
    buf.tick(write_enable=True, data_in=5)
    buf.reset()
    assert buf.empty
    assert buf.data_out == 0


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        CircularBuffer(size=0)