"""Top-level controller: power state, work distribution to cores and result collection."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from .scheduler import MAX_CORES

_MASK8 = 0xFF
_MASK16 = 0xFFFF
_MASK32 = 0xFFFFFFFF


class PowerState(IntEnum):
    RESET = 0
    IDLE = 1
    ACTIVE = 2
    SLEEP = 3
    EMERGENCY = 4


class _CollectState(IntEnum):
    IDLE = 0
    COLLECT = 1
    HANDSHAKE = 2
    COMPLETE = 3


@dataclass
class ControllerInputs:
    """Inputs sampled on one clock edge, including the arbiter and scheduler outputs."""

    enable: bool = True
    system_ready: bool = True
    power_save_mode: bool = False
    emergency_mode: bool = False
    qos_level: int = 0
    core_selection_valid: bool = False
    core_available: bool = False
    selected_core_id: int = 0
    arbiter_work: Any = None
    arbiter_work_valid: bool = False
    core_result_valid: Sequence[bool] | None = None
    core_result_in: Sequence[Any] | None = None
    result_ready: bool = False


class Controller:
    """Cycle model of the main controller coordinating the core array."""

    def __init__(self, num_cores: int = MAX_CORES):
        if num_cores < 1:
            raise ValueError("num_cores must be at least 1")
        self.num_cores = num_cores
        self.reset()

    def reset(self) -> None:
        """Apply the active-low reset."""
        self.ready = False
        self.power_state = PowerState.RESET
        self.current_qos_level = 0
        self.core_work_out: list[Any] = [None] * self.num_cores
        self.core_work_valid = [False] * self.num_cores
        self.result_output: Any = None
        self.result_valid = False
        self.core_result_ready = [False] * self.num_cores
        self.collection_state = _CollectState.IDLE
        self.current_core = 0
        self.cores_active = 0
        self.throughput_counter = 0
        self.queue_depth = 0

    @staticmethod
    def module_enable(enable: bool, system_ready: bool) -> bool:
        """Enable shared by the arbiter, scheduler and QoS manager."""
        return bool(enable) and bool(system_ready)

    def _per_core(self, values: Sequence[Any] | None, default: Any, name: str) -> list[Any]:
        if values is None:
            return [default] * self.num_cores
        if len(values) != self.num_cores:
            raise ValueError(f"expected {name} for {self.num_cores} cores, got {len(values)}")
        return list(values)

    def tick(self, inputs: ControllerInputs) -> None:
        """Advance one rising clock edge; every register samples the old values."""
        if not 0 <= inputs.selected_core_id <= _MASK8:
            raise ValueError("selected_core_id must fit in 8 bits")
        result_valid_in = [bool(v) for v in
                           self._per_core(inputs.core_result_valid, False, "result valid flags")]
        result_in = self._per_core(inputs.core_result_in, None, "results")

        active = self.module_enable(inputs.enable, inputs.system_ready)
        self._main(inputs, active)
        self._distribute(inputs, active)
        self._collect(inputs, active, result_valid_in, result_in)

    def _main(self, inputs: ControllerInputs, active: bool) -> None:
        if not active:
            self.ready = False
            self.power_state = PowerState.IDLE
            return
        self.ready = True
        if inputs.emergency_mode:
            self.power_state = PowerState.EMERGENCY
        elif inputs.power_save_mode:
            self.power_state = PowerState.SLEEP
        else:
            self.power_state = PowerState.ACTIVE
        self.current_qos_level = inputs.qos_level & _MASK8

    def _distribute(self, inputs: ControllerInputs, active: bool) -> None:
        valid = [False] * self.num_cores
        if active and inputs.core_selection_valid and inputs.core_available:
            core_id = inputs.selected_core_id
            if core_id < self.num_cores:
                self.core_work_out[core_id] = inputs.arbiter_work
                valid[core_id] = bool(inputs.arbiter_work_valid)
        self.core_work_valid = valid

    def _collect(self, inputs: ControllerInputs, active: bool,
                 result_valid_in: list[bool], result_in: list[Any]) -> None:
        if not active:
            self.result_valid = False
            self.core_result_ready = [False] * self.num_cores
            self.collection_state = _CollectState.IDLE
            return

        state = self.collection_state
        if state is _CollectState.IDLE:
            self.result_valid = False
            self.core_result_ready = [False] * self.num_cores
            for offset in range(self.num_cores):
                index = (self.current_core + offset) % self.num_cores
                if result_valid_in[index]:
                    self.current_core = index
                    self.collection_state = _CollectState.COLLECT
                    break
        elif state is _CollectState.COLLECT:
            if self.current_core < self.num_cores and result_valid_in[self.current_core]:
                self.result_output = result_in[self.current_core]
                self.result_valid = True
                self.collection_state = _CollectState.HANDSHAKE
            else:
                self.collection_state = _CollectState.IDLE
        elif state is _CollectState.HANDSHAKE:
            if inputs.result_ready:
                self.core_result_ready[self.current_core] = True
                self.collection_state = _CollectState.COMPLETE
        else:
            self.core_result_ready[self.current_core] = False
            self.result_valid = False
            self.current_core = (self.current_core + 1) % self.num_cores
            self.collection_state = _CollectState.IDLE

    def performance(self, core_work_ready: Sequence[bool], completed_tasks: int = 0,
                    pending_work: int = 0) -> int:
        """Update the performance counters; return the number of cores accepting work."""
        ready = self._per_core(core_work_ready, False, "ready flags")
        count = sum(1 for valid, rdy in zip(self.core_work_valid, ready) if valid and rdy)
        self.cores_active = count & _MASK32
        self.throughput_counter = completed_tasks & _MASK32
        self.queue_depth = pending_work & _MASK16
        return self.cores_active