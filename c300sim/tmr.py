"""Triple modular redundancy voter and error monitor."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

_MASK256 = (1 << 256) - 1
ERROR_THRESHOLD = 3
NUM_TMR_CORES = 100
CRITICAL_THRESHOLD = 10


def _check256(value: int) -> int:
    if not 0 <= value <= _MASK256:
        raise ValueError("data must be an unsigned 256-bit integer")
    return value


def majority_vote(a: int, b: int, c: int) -> int:
    """Bitwise two-out-of-three vote over 256-bit words."""
    a, b, c = _check256(a), _check256(b), _check256(c)
    return (a & b) | (a & c) | (b & c)


def majority_vote_bool(a: bool, b: bool, c: bool) -> bool:
    """True when at least two of the three inputs are true."""
    return sum((bool(a), bool(b), bool(c))) >= 2


@dataclass(frozen=True)
class FaultFlags:
    ab_match: bool
    ac_match: bool
    bc_match: bool
    fault_a: bool
    fault_b: bool
    fault_c: bool

    @property
    def _count(self) -> int:
        return sum((self.fault_a, self.fault_b, self.fault_c))

    @property
    def any(self) -> bool:
        return self._count > 0

    @property
    def single(self) -> bool:
        return self._count == 1

    @property
    def double(self) -> bool:
        return self._count == 2

    @property
    def triple(self) -> bool:
        return self._count == 3


def detect_faults(data_a: int, data_b: int, data_c: int,
                  valid_a: bool, valid_b: bool, valid_c: bool) -> FaultFlags:
    """Compare the three replicas and flag the one that disagrees with the other two."""
    ab = data_a == data_b and bool(valid_a) == bool(valid_b)
    ac = data_a == data_c and bool(valid_a) == bool(valid_c)
    bc = data_b == data_c and bool(valid_b) == bool(valid_c)
    return FaultFlags(
        ab_match=ab,
        ac_match=ac,
        bc_match=bc,
        fault_a=not ab and not ac and bc,
        fault_b=not ab and ac and not bc,
        fault_c=ab and not ac and not bc,
    )


@dataclass(frozen=True)
class TMROutputs:
    data_out: int
    valid_out: bool
    error_detected: bool
    error_corrected: bool
    error_count: int


class TMRVoter:
    """Cycle model of one TMR voter."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.voted_data = 0
        self.voted_valid = False
        self.fault_counter = 0
        self.tmr_enable = False

    def tick(self, enable: bool, data: tuple[int, int, int],
             valid: tuple[bool, bool, bool]) -> None:
        """Advance one rising clock edge with the three replica inputs."""
        if not enable:
            self.tmr_enable = False
            return
        a, b, c = data
        va, vb, vc = valid
        faults = detect_faults(a, b, c, va, vb, vc)

        self.tmr_enable = True
        self.voted_data = majority_vote(a, b, c)
        self.voted_valid = majority_vote_bool(va, vb, vc)

        count = self.fault_counter
        new_count = count
        if faults.single and count < ERROR_THRESHOLD:
            new_count = count + 1
        if faults.triple:
            new_count = 3
        elif faults.double:
            new_count = 2
        self.fault_counter = new_count

    def outputs(self, data: tuple[int, int, int],
                valid: tuple[bool, bool, bool]) -> TMROutputs:
        """Registered vote plus error flags computed from the current inputs."""
        a, b, c = data
        va, vb, vc = valid
        faults = detect_faults(a, b, c, va, vb, vc)
        return TMROutputs(
            data_out=self.voted_data,
            valid_out=self.voted_valid and self.tmr_enable,
            error_detected=faults.any,
            error_corrected=faults.single,
            error_count=self.fault_counter,
        )


class TMRMonitor:
    """Counts voters reporting errors and judges system health."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.total_errors = 0
        self.corrected_errors = 0
        self.system_health = True

    def tick(self, error_detected: Iterable[bool], error_corrected: Iterable[bool]) -> None:
        """Advance one rising clock edge with the per-voter error flags."""
        errors = sum(1 for flag in error_detected if flag) & 0xFFFF
        corrections = sum(1 for flag in error_corrected if flag) & 0xFFFF
        self.total_errors = errors
        self.corrected_errors = corrections
        self.system_health = errors < CRITICAL_THRESHOLD

    @property
    def critical_failure(self) -> bool:
        return self.total_errors >= CRITICAL_THRESHOLD