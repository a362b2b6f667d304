"""Single hashing core: a four-stage pipeline with nonce sweep, UUID and security."""

from __future__ import annotations

from dataclasses import dataclass

from .core_security import CoreSecurity, SensorReadings
from .uuid_gen import CoreUUID

_MASK32 = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1
_MASK256 = (1 << 256) - 1

ROUND_KEYS = (0x428A2F98D728AE22, 0x7137449123EF65CD, 0xB5C0FBCFEC4D3B2F)
IV_WORDS = (0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A)


def _check_width(value: int, bits: int, name: str) -> int:
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} must be an unsigned {bits}-bit integer")
    return value


def _rotl32(word: int) -> int:
    return ((word << 1) | (word >> 31)) & _MASK32


def sha256_round(data: int, key: int) -> int:
    """XOR each 32-bit word of ``data`` with ``key`` and rotate it left by one."""
    _check_width(data, 256, "data")
    _check_width(key, 256, "key")
    result = 0
    for shift in range(0, 256, 32):
        word = ((data ^ key) >> shift) & _MASK32
        result |= _rotl32(word) << shift
    return result


def sha256_compression(data: int, nonce: int) -> int:
    """Place ``nonce`` in the low word and mix the top four words with the IV."""
    _check_width(data, 256, "data")
    _check_width(nonce, 32, "nonce")
    result = (data & ~_MASK32 & _MASK256) | nonce
    for index, iv in enumerate(IV_WORDS):
        result ^= iv << (224 - 32 * index)
    return result


@dataclass(frozen=True)
class CoreOutputs:
    hash_result: int
    hash_valid: bool
    hash_found: bool
    winning_nonce: int
    core_ready: bool
    core_busy: bool
    core_uuid: int
    security_violation: bool


class HashCore:
    """Cycle model of one hashing core."""

    def __init__(self, core_id: int = 0):
        _check_width(core_id, 8, "core_id")
        self.core_id = core_id
        self.uuid_generator = CoreUUID(core_id)
        self.security = CoreSecurity()
        self._enable = False
        self._target_hash = 0
        self.reset()

    def reset(self) -> None:
        """Apply the active-low reset to the core and its submodules."""
        self.stages = [0, 0, 0, 0]
        self.pipeline_valid = False
        self.core_active = False
        self.hash_counter = 0
        self.current_nonce = 0
        self.uuid_generator.reset()
        self.security.reset()

    def tick(
        self,
        enable: bool = True,
        start: bool = True,
        input_data: int = 0,
        target_hash: int | None = None,
        nonce_start: int = 0,
        security_enable: bool = False,
        readings: SensorReadings | None = None,
    ) -> None:
        """Advance one rising clock edge; every stage samples the previous values."""
        _check_width(input_data, 256, "input_data")
        _check_width(nonce_start, 32, "nonce_start")
        if target_hash is not None:
            self._target_hash = _check_width(target_hash, 256, "target_hash")
        self._enable = enable

        self.uuid_generator.tick(enable=security_enable)
        self.security.tick(enable=security_enable, readings=readings)

        if enable and start:
            s1, s2, s3, _ = self.stages
            self.stages = [
                sha256_compression(input_data, self.current_nonce),
                sha256_round(s1, ROUND_KEYS[0]),
                sha256_round(s2, ROUND_KEYS[1]),
                sha256_round(s3, ROUND_KEYS[2]),
            ]
            self.pipeline_valid = True
            self.core_active = True
            self.hash_counter = (self.hash_counter + 1) & _MASK64
            if self.current_nonce == 0:
                self.current_nonce = nonce_start
            else:
                self.current_nonce = (self.current_nonce + 1) & _MASK32
        else:
            self.core_active = False
            self.pipeline_valid = False

    def outputs(self, enable: bool | None = None, target_hash: int | None = None) -> CoreOutputs:
        """Combinational outputs; inputs default to those of the last tick."""
        if enable is None:
            enable = self._enable
        if target_hash is None:
            target_hash = self._target_hash
        else:
            _check_width(target_hash, 256, "target_hash")
        result = self.stages[3]
        match = self.pipeline_valid and result == target_hash
        return CoreOutputs(
            hash_result=result,
            hash_valid=self.pipeline_valid,
            hash_found=match,
            winning_nonce=self.current_nonce,
            core_ready=not self.core_active and bool(enable),
            core_busy=self.core_active,
            core_uuid=self.uuid_generator.uuid,
            security_violation=self.security.outputs.security_violation,
        )