import pytest

from c300sim.uuid_gen import (
    CoreUUID,
    crc32_bits,
    lfsr_next,
    swap_bytes32,
)


def _field(value, low, width):
    return (value >> low) & ((1 << width) - 1)


def test_lfsr_stays_in_32_bits():
    value = 0x12345678
    for _ in range(200):
        value = lfsr_next(value)
        assert 0 <= value <= 0xFFFFFFFF


def test_lfsr_zero_is_fixed_point():
    assert lfsr_next(0) == 0


def test_lfsr_shifts_left():
    assert lfsr_next(0x1) == 0x2


def test_swap_bytes():
    assert swap_bytes32(0x12345678) == 0x78563412


def test_swap_bytes_is_involution():
    for value in (0, 0xC300FACE, 0xDEADBEEF, 0xFFFFFFFF, 0x01020304):
        assert swap_bytes32(swap_bytes32(value)) == value


def test_crc_rejects_out_of_range():
    with pytest.raises(ValueError):
        crc32_bits(-1)
    with pytest.raises(ValueError):
        crc32_bits(1 << 128)


def test_crc_distinguishes_inputs():
    assert crc32_bits(1) != crc32_bits(2)
    assert 0 <= crc32_bits((1 << 128) - 1) <= 0xFFFFFFFF


def test_invalid_core_id():
    with pytest.raises(ValueError):
        CoreUUID(256)


def test_not_valid_before_entropy_ready():
    gen = CoreUUID(7)
    gen.tick()
    assert gen.ready is True
    assert gen.valid is False
    assert gen.uuid == 0


def test_uuid_fields_after_generation():
    gen = CoreUUID(42)
    gen.tick()
    entropy_before = gen.entropy
    gen.tick()
    assert gen.valid is True
    uuid = gen.uuid
    assert _field(uuid, 0, 8) == 42
    assert _field(uuid, 8, 32) == 0xC300FACE
    assert _field(uuid, 40, 32) == 0xDEADBEEF
    assert _field(uuid, 72, 32) == 0x12345678 ^ swap_bytes32(entropy_before)
    assert _field(uuid, 104, 24) == 1
    assert gen.generation_count == 1


def test_checksum_matches_register():
    gen = CoreUUID(3)
    gen.tick()
    gen.tick()
    assert gen.checksum == crc32_bits(gen.uuid)


def test_uuid_stable_without_regenerate():
    gen = CoreUUID(9)
    gen.tick()
    gen.tick()
    first = gen.uuid
    for _ in range(5):
        gen.tick()
    assert gen.uuid == first
    assert gen.generation_count == 1


def test_regenerate_changes_uuid():
    gen = CoreUUID(9)
    gen.tick()
    gen.tick()
    first = gen.uuid
    gen.tick(regenerate=True)
    assert gen.uuid != first
    assert gen.generation_count == 2


def test_disabled_does_nothing():
    gen = CoreUUID(1)
    for _ in range(4):
        gen.tick(enable=False)
    assert gen.ready is False
    assert gen.timestamp == 0
    assert gen.lfsr_state == 0x12345678


def test_reset_clears_uuid():
    gen = CoreUUID(5)
    gen.tick()
    gen.tick()
    gen.reset()
    assert gen.uuid == 0
    assert gen.valid is False
    assert gen.timestamp == 0


def test_different_cores_get_different_uuids():
    a, b = CoreUUID(1), CoreUUID(2)
    for gen in (a, b):
        gen.tick()
        gen.tick()
    assert a.uuid != b.uuid
    assert a.uuid ^ b.uuid == 1 ^ 2