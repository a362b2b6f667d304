"""Processing engine: drives the hash pipeline, sweeps nonces and checks difficulty."""

from __future__ import annotations

from dataclasses import dataclass

from .circular_buffer import CircularBuffer

_MASK32 = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1
_HASH_BITS = 256

PIPELINE_DEPTH = 4
BUFFER_SIZE = 16
NONCE_START = 0
NONCE_INCREMENT = 1

STATUS_READY = 0x01
STATUS_PROCESSING = 0x02
STATUS_BIST_RUNNING = 0x04
STATUS_SOLUTION_FOUND = 0x08
STATUS_BUFFER_FULL = 0x10
STATUS_PIPELINE_VALID = 0x20


def _check_width(value: int, bits: int, name: str) -> int:
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} must be an unsigned {bits}-bit integer")
    return value


def leading_zeros(hash_value: int) -> int:
    """Number of leading zero bits in a 256-bit hash."""
    _check_width(hash_value, _HASH_BITS, "hash_value")
    return _HASH_BITS - hash_value.bit_length()


def check_difficulty(hash_value: int, target: int) -> bool:
    """True if the hash has at least ``target`` leading zero bits.

    The zero count is held in an 8-bit register, so an all-zero hash
    counts as zero leading zeros.
    """
    _check_width(target, 32, "target")
    return (leading_zeros(hash_value) & 0xFF) >= target


@dataclass
class EngineInputs:
    """Inputs sampled on one clock edge, including the pipeline and BIST outputs."""

    enable: bool = True
    start_processing: bool = False
    work_data: int = 0
    target_difficulty: int = 0
    bist_enable: bool = False
    pipeline_ready: bool = False
    pipeline_valid: bool = False
    pipeline_result: int = 0
    bist_running: bool = False
    bist_result: bool = False


class Engine:
    """Cycle model of one processing engine."""

    def __init__(self, engine_id: int = 0):
        _check_width(engine_id, 8, "engine_id")
        self.engine_id = engine_id
        self.work_buffer = CircularBuffer(BUFFER_SIZE, default=0)
        self.reset()

    def reset(self) -> None:
        """Apply the active-low reset."""
        self.hash_result = 0
        self.hash_valid = False
        self.ready = False
        self.processing_complete = False
        self.solution_found = False
        self.processing_active = False
        self.nonce_result = 0
        self.current_nonce = NONCE_START
        self.work_buffer.reset()
        self.reset_performance_counters()

    def reset_performance_counters(self) -> None:
        self.performance_counter = 0
        self.cycle_counter = 0

    def pipeline_enable(self, inputs: EngineInputs) -> bool:
        """Combinational enable for the hash pipeline."""
        return (
            bool(inputs.enable)
            and not inputs.bist_enable
            and (self.processing_active or bool(inputs.start_processing))
            and not self.work_buffer.full
        )

    def tick(self, inputs: EngineInputs) -> None:
        """Advance one rising clock edge; every register samples the old values."""
        _check_width(inputs.work_data, _HASH_BITS, "work_data")
        _check_width(inputs.pipeline_result, _HASH_BITS, "pipeline_result")
        _check_width(inputs.target_difficulty, 32, "target_difficulty")

        buffer_full = self.work_buffer.full
        was_active = self.processing_active
        old_nonce = self.current_nonce
        pipeline_enabled = self.pipeline_enable(inputs)

        if inputs.enable:
            self._main_process(inputs, buffer_full, was_active, old_nonce)
            self._nonce_generation(inputs, pipeline_enabled, old_nonce)
        else:
            self.ready = False
            self.processing_active = False

        self.work_buffer.tick(
            write_enable=inputs.start_processing,
            read_enable=inputs.pipeline_ready,
            data_in=inputs.work_data,
        )

    def _main_process(self, inputs: EngineInputs, buffer_full: bool,
                      was_active: bool, old_nonce: int) -> None:
        self.cycle_counter = (self.cycle_counter + 1) & _MASK32

        if inputs.bist_enable:
            self.ready = False
            self.processing_active = False
            return

        if inputs.start_processing and not buffer_full:
            self.processing_active = True
            self.ready = False

        if inputs.pipeline_valid:
            self.hash_result = inputs.pipeline_result
            self.hash_valid = True
            if check_difficulty(inputs.pipeline_result, inputs.target_difficulty):
                self.solution_found = True
                self.nonce_result = old_nonce
                self.processing_complete = True
            self.performance_counter = (self.performance_counter + 1) & _MASK32
        else:
            self.hash_valid = False

        if not was_active and inputs.pipeline_ready and not buffer_full:
            self.ready = True

    def _nonce_generation(self, inputs: EngineInputs, pipeline_enabled: bool,
                          old_nonce: int) -> None:
        nonce = old_nonce
        if pipeline_enabled and inputs.pipeline_ready:
            nonce = (old_nonce + NONCE_INCREMENT) & _MASK64
        if inputs.start_processing:
            nonce = (NONCE_START + self.engine_id * 0x100000000) & _MASK64
        self.current_nonce = nonce

    def status(self, inputs: EngineInputs) -> int:
        """Eight-bit status word: ready, processing, BIST, solution, full, valid."""
        flags = (
            (self.ready, STATUS_READY),
            (self.processing_active, STATUS_PROCESSING),
            (inputs.bist_running, STATUS_BIST_RUNNING),
            (self.solution_found, STATUS_SOLUTION_FOUND),
            (self.work_buffer.full, STATUS_BUFFER_FULL),
            (inputs.pipeline_valid, STATUS_PIPELINE_VALID),
        )
        return sum(bit for flag, bit in flags if flag)