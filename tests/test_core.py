import pytest

from c300sim.core import (
    IV_WORDS,
    ROUND_KEYS,
    HashCore,
    sha256_compression,
    sha256_round,
)

DATA = int.from_bytes(bytes(range(32)), "big")
MASK32 = 0xFFFFFFFF


def test_round_with_zero_key_returns_after_32_rotations():
    value = DATA
    for _ in range(32):
        value = sha256_round(value, 0)
    assert value == DATA


def test_round_key_folds_into_data():
    key = ROUND_KEYS[0]
    assert sha256_round(DATA, key) == sha256_round(DATA ^ key, 0)


def test_round_rejects_oversized_data():
    with pytest.raises(ValueError):
        sha256_round(1 << 256, 0)


def test_compression_inserts_nonce_and_iv():
    out = sha256_compression(0, 0xABCD1234)
    assert out & MASK32 == 0xABCD1234
    assert out >> 224 == IV_WORDS[0]
    assert (out >> 32) & ((1 << 96) - 1) == 0


def test_compression_twice_restores_upper_words():
    nonce = 0x01020304
    twice = sha256_compression(sha256_compression(DATA, nonce), nonce)
    assert twice == (DATA & ~MASK32) | nonce


def test_compression_rejects_wide_nonce():
    with pytest.raises(ValueError):
        sha256_compression(0, 1 << 32)


def test_ready_before_any_start():
    core = HashCore(5)
    out = core.outputs(enable=True, target_hash=0)
    assert out.core_ready
    assert not out.core_busy
    assert not out.hash_valid


def test_first_tick_loads_nonce_start():
    core = HashCore()
    core.tick(input_data=DATA, nonce_start=100)
    out = core.outputs()
    assert out.core_busy
    assert not out.core_ready
    assert out.hash_valid
    assert out.winning_nonce == 100


def test_nonce_increments_after_load():
    core = HashCore()
    core.tick(nonce_start=100)
    core.tick(nonce_start=100)
    core.tick(nonce_start=100)
    assert core.outputs().winning_nonce == 102


def test_zero_nonce_start_stays_zero():
    core = HashCore()
    for _ in range(5):
        core.tick(nonce_start=0)
    assert core.outputs().winning_nonce == 0


def test_pipeline_result_after_four_cycles():
    core = HashCore()
    for _ in range(4):
        core.tick(input_data=DATA, nonce_start=100)
    stage = sha256_compression(DATA, 0)
    for key in ROUND_KEYS:
        stage = sha256_round(stage, key)
    assert core.outputs().hash_result == stage


def test_hash_found_when_target_matches():
    core = HashCore()
    for _ in range(4):
        core.tick(input_data=DATA, nonce_start=7)
    result = core.outputs().hash_result
    assert core.outputs(target_hash=result).hash_found
    assert not core.outputs(target_hash=result ^ 1).hash_found


def test_stopping_clears_valid_and_keeps_counter():
    core = HashCore()
    core.tick()
    core.tick()
    core.tick(start=False)
    out = core.outputs()
    assert not out.hash_valid
    assert not out.core_busy
    assert core.hash_counter == 2


def test_disabled_core_is_not_ready():
    core = HashCore()
    core.tick(enable=False)
    assert not core.outputs().core_ready


def test_reset_clears_pipeline():
    core = HashCore()
    for _ in range(4):
        core.tick(input_data=DATA, nonce_start=9)
    core.reset()
    out = core.outputs()
    assert out.hash_result == 0
    assert out.winning_nonce == 0
    assert core.hash_counter == 0


def test_uuid_carries_core_id():
    core = HashCore(7)
    core.tick(security_enable=True)
    core.tick(security_enable=True)
    out = core.outputs()
    assert out.core_uuid & 0xFF == 7
    assert out.core_uuid == core.uuid_generator.uuid


def test_no_security_violation_with_nominal_readings():
    core = HashCore()
    for _ in range(3):
        core.tick(security_enable=True)
    assert not core.outputs().security_violation


def test_invalid_core_id_rejected():
    with pytest.raises(ValueError):
        HashCore(256)


def test_invalid_nonce_start_rejected():
    core = HashCore()
    with pytest.raises(ValueError):
        core.tick(nonce_start=-1)