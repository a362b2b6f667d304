"""Per-core hardware UUID generator driven by an LFSR entropy source."""

from __future__ import annotations

_MASK32 = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1
_UUID_BITS = 128

CHIP_SIGNATURE = 0xC300FACE
WAFER_SIGNATURE = 0xDEADBEEF
PROCESS_SIGNATURE = 0x12345678
LFSR_SEED = 0x12345678
CRC_POLYNOMIAL = 0x04C11DB7


def lfsr_next(value: int) -> int:
    """Advance the 32-bit LFSR one step (taps at bits 31, 30, 29 and 5)."""
    value &= _MASK32
    feedback = ((value >> 31) ^ (value >> 30) ^ (value >> 29) ^ (value >> 5)) & 1
    return ((value << 1) | feedback) & _MASK32


def swap_bytes32(value: int) -> int:
    """Reverse the byte order of a 32-bit word."""
    return int.from_bytes((value & _MASK32).to_bytes(4, "little"), "big")


def _rotl32(value: int) -> int:
    value &= _MASK32
    return ((value << 1) | (value >> 31)) & _MASK32


def crc32_bits(data: int) -> int:
    """CRC-32 over the 128 bits of ``data``, least significant bit first."""
    if not 0 <= data < (1 << _UUID_BITS):
        raise ValueError("data must be an unsigned 128-bit integer")
    crc = _MASK32
    for i in range(_UUID_BITS):
        bit = (data >> i) & 1
        msb = (crc >> 31) & 1
        crc = (crc << 1) & _MASK32
        if msb ^ bit:
            crc ^= CRC_POLYNOMIAL
    return crc ^ _MASK32


class CoreUUID:
    """Cycle model of the UUID generator attached to one core."""

    def __init__(self, core_id: int = 0):
        if not 0 <= core_id <= 0xFF:
            raise ValueError("core_id must fit in 8 bits")
        self.core_id = core_id
        self.reset()

    def reset(self) -> None:
        """Apply the active-low reset to every register."""
        self._uuid = 0
        self._generated = False
        self.generation_count = 0
        self.lfsr_state = LFSR_SEED
        self.entropy = 0
        self._trng_ready = False
        self.timestamp = 0
        self.chip_serial = CHIP_SIGNATURE
        self.wafer_lot = WAFER_SIGNATURE
        self.process_signature = PROCESS_SIGNATURE

    def tick(self, enable: bool = True, regenerate: bool = False) -> None:
        """Advance one rising clock edge; all registers sample their old values."""
        if not enable:
            return

        new_uuid = None
        if (not self._generated or regenerate) and self._trng_ready:
            signature = self.process_signature ^ swap_bytes32(self.entropy)
            new_uuid = (
                (self.core_id & 0xFF)
                | (self.chip_serial & _MASK32) << 8
                | (self.wafer_lot & _MASK32) << 40
                | (signature & _MASK32) << 72
                | (self.timestamp & 0xFFFFFF) << 104
            )

        next_lfsr = lfsr_next(self.lfsr_state)
        next_entropy = _rotl32(self.entropy ^ next_lfsr)

        if new_uuid is not None:
            self._uuid = new_uuid
            self._generated = True
            self.generation_count = (self.generation_count + 1) & 0xFF
        self.lfsr_state = next_lfsr
        self.entropy = next_entropy
        self._trng_ready = True
        self.timestamp = (self.timestamp + 1) & _MASK64

    @property
    def uuid(self) -> int:
        """The 128-bit hardware UUID register."""
        return self._uuid

    @property
    def valid(self) -> bool:
        """True once a UUID has been generated."""
        return self._generated

    @property
    def ready(self) -> bool:
        """True once the entropy source has run at least one cycle."""
        return self._trng_ready

    @property
    def checksum(self) -> int:
        """CRC-32 of the current UUID register."""
        return crc32_bits(self._uuid)