"""Adaptive work scheduler that spreads queued work items across the cores."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

MAX_CORES = 300
MAX_WORK_ITEMS = 1024
PERFORMANCE_HISTORY_SIZE = 64
LOAD_THRESHOLD_HIGH = 85
LOAD_THRESHOLD_LOW = 15
ADAPTATION_CYCLES = 16

_NO_LOAD = 0xFF
_NO_SCORE = 0xFFFF


@dataclass(frozen=True)
class WorkItem:
    """One unit of work waiting to be assigned to a core."""

    work_id: int = 0
    priority: int = 0
    complexity: int = 0
    estimated_cycles: int = 0


@dataclass(frozen=True)
class CoreStatus:
    """Status a core reports to the scheduler."""

    core_id: int = 0
    load_percentage: int = 0
    current_work_cycles: int = 0
    avg_completion_time: int = 0
    active: bool = False
    available: bool = True


class SchedulerAlgorithm(IntEnum):
    ROUND_ROBIN = 0
    LOAD_BALANCED = 1
    PRIORITY_BASED = 2
    PERFORMANCE_AWARE = 3
    ADAPTIVE_HYBRID = 4


class AdaptiveScheduler:
    """Cycle model of the adaptive scheduler.

    Work items sit in a ring of ``queue_size`` slots. Each clock edge the
    active algorithm may hand the item at the head (or, for the priority
    algorithm, the highest-priority item) to one core; the head slot is
    then released.
    """

    def __init__(self, num_cores: int = MAX_CORES, queue_size: int = MAX_WORK_ITEMS):
        if num_cores < 1:
            raise ValueError("num_cores must be at least 1")
        if queue_size < 1:
            raise ValueError("queue_size must be at least 1")
        self.num_cores = num_cores
        self.queue_size = queue_size
        self.reset()

    def reset(self) -> None:
        """Apply the active-low reset."""
        self._slots: list[WorkItem | None] = [None] * self.queue_size
        self._valid = [False] * self.queue_size
        self._head = 0
        self._tail = 0
        self.queue_count = 0
        self.next_core_rr = 0
        self.best_core_lb = 0
        self.algorithm = SchedulerAlgorithm.ROUND_ROBIN
        self.adaptation_counter = 0
        self.performance_metric = 0
        self.algorithm_switched = False
        self.adaptation_active = False
        self.scheduler_ready = False
        self.work_ready = False
        self.avg_core_utilization = 0
        self.total_scheduled_work = 0
        self.performance_history: deque[int] = deque(maxlen=PERFORMANCE_HISTORY_SIZE)

    def _check_cores(self, cores: Sequence[CoreStatus]) -> None:
        if len(cores) != self.num_cores:
            raise ValueError(f"expected status for {self.num_cores} cores, got {len(cores)}")

    def _check_ready(self, ready: Sequence[bool]) -> None:
        if len(ready) != self.num_cores:
            raise ValueError(f"expected ready flags for {self.num_cores} cores, got {len(ready)}")

    def enqueue(self, item: WorkItem) -> bool:
        """Append ``item`` at the tail; False if the queue is full."""
        if self.queue_count >= self.queue_size:
            return False
        self._slots[self._tail] = item
        self._valid[self._tail] = True
        self._tail = (self._tail + 1) % self.queue_size
        self.queue_count += 1
        return True

    def _dequeue_head(self) -> None:
        self._valid[self._head] = False
        self._head = (self._head + 1) % self.queue_size
        self.queue_count -= 1

    def find_least_loaded_core(self, cores: Sequence[CoreStatus]) -> int:
        """Index of the available core with the lowest load, or 0 if none beats 0xFF."""
        self._check_cores(cores)
        best_index, best_load = 0, _NO_LOAD
        for index, core in enumerate(cores):
            if core.available and core.load_percentage < best_load:
                best_index, best_load = index, core.load_percentage
        return best_index

    def find_highest_priority_work(self) -> int:
        """Slot index of the first valid item with the highest priority above 0, else 0."""
        best_index, best_priority = 0, 0
        for index, (valid, item) in enumerate(zip(self._valid, self._slots)):
            if valid and item is not None and item.priority > best_priority:
                best_index, best_priority = index, item.priority
        return best_index

    def calculate_core_utilization(self, cores: Sequence[CoreStatus]) -> int:
        """Mean load over the active cores, 0 when no core is active."""
        self._check_cores(cores)
        loads = [core.load_percentage for core in cores if core.active]
        return sum(loads) // len(loads) if loads else 0

    def should_adapt_algorithm(self, cores: Sequence[CoreStatus]) -> bool:
        """True once settled, when utilisation is above or below the thresholds."""
        if self.adaptation_counter < ADAPTATION_CYCLES:
            return False
        utilization = self.calculate_core_utilization(cores)
        return utilization > LOAD_THRESHOLD_HIGH or utilization < LOAD_THRESHOLD_LOW

    def select_best_algorithm(self, cores: Sequence[CoreStatus],
                              performance_boost: bool = False,
                              power_save_mode: bool = False) -> SchedulerAlgorithm:
        """Pick the algorithm suited to the mode flags and current utilisation."""
        utilization = self.calculate_core_utilization(cores)
        if power_save_mode:
            return SchedulerAlgorithm.ROUND_ROBIN
        if performance_boost:
            return SchedulerAlgorithm.PERFORMANCE_AWARE
        if utilization > LOAD_THRESHOLD_HIGH:
            return SchedulerAlgorithm.LOAD_BALANCED
        if utilization < LOAD_THRESHOLD_LOW:
            return SchedulerAlgorithm.PRIORITY_BASED
        return SchedulerAlgorithm.ADAPTIVE_HYBRID

    def _head_item(self) -> WorkItem:
        return self._slots[self._head] or WorkItem()

    def _choose(self, cores: Sequence[CoreStatus],
                ready: Sequence[bool]) -> tuple[int, WorkItem] | None:
        algorithm = self.algorithm
        if algorithm is SchedulerAlgorithm.ROUND_ROBIN:
            start = self.next_core_rr
            for offset in range(self.num_cores):
                index = (start + offset) % self.num_cores
                if cores[index].available and ready[index]:
                    self.next_core_rr = (index + 1) % self.num_cores
                    return index, self._head_item()
            return None

        if algorithm is SchedulerAlgorithm.LOAD_BALANCED:
            index = self.find_least_loaded_core(cores)
            if cores[index].available and ready[index]:
                self.best_core_lb = index
                return index, self._head_item()
            return None

        if algorithm is SchedulerAlgorithm.PRIORITY_BASED:
            slot = self.find_highest_priority_work()
            index = self.find_least_loaded_core(cores)
            if cores[index].available and ready[index]:
                return index, self._slots[slot] or WorkItem()
            return None

        if algorithm is SchedulerAlgorithm.PERFORMANCE_AWARE:
            best_index, best_score = 0, _NO_SCORE
            for index, core in enumerate(cores):
                if core.available and ready[index]:
                    score = (core.load_percentage * 256 + core.avg_completion_time) & 0xFFFF
                    if score < best_score:
                        best_index, best_score = index, score
            if best_score < _NO_SCORE:
                return best_index, self._head_item()
            return None

        return None

    def schedule(self, cores: Sequence[CoreStatus],
                 ready: Sequence[bool]) -> tuple[int, WorkItem] | None:
        """Run the active algorithm once; return ``(core, item)`` if work was assigned.

        An assignment always releases the slot at the head of the queue.
        """
        self._check_cores(cores)
        self._check_ready(ready)
        if self.queue_count == 0:
            return None
        assignment = self._choose(cores, ready)
        if assignment is not None:
            self._dequeue_head()
        return assignment

    def tick(self, enable: bool, cores: Sequence[CoreStatus], ready: Sequence[bool],
             work_item: WorkItem | None = None, performance_boost: bool = False,
             power_save_mode: bool = False) -> tuple[int, WorkItem] | None:
        """Advance one rising clock edge; return the assignment made, if any."""
        self._check_cores(cores)
        self._check_ready(ready)

        old_counter = self.adaptation_counter
        old_count = self.queue_count
        assignment = self.schedule(cores, ready)

        if not enable:
            self.scheduler_ready = False
            self.work_ready = False
            self.adaptation_active = False
            return assignment

        self.scheduler_ready = True
        self.algorithm_switched = False
        if old_counter >= ADAPTATION_CYCLES:
            utilization = self.calculate_core_utilization(cores)
            self.adaptation_active = True
            self.performance_metric = utilization
            self.performance_history.append(utilization)
        else:
            self.adaptation_active = False

        if self.should_adapt_algorithm(cores):
            chosen = self.select_best_algorithm(cores, performance_boost, power_save_mode)
            if chosen is not self.algorithm:
                self.algorithm = chosen
                self.algorithm_switched = True
                self.adaptation_counter = 0
        if old_counter < ADAPTATION_CYCLES:
            self.adaptation_counter = old_counter + 1

        if work_item is not None:
            self.enqueue(work_item)
        self.work_ready = old_count < self.queue_size - 1

        self.avg_core_utilization = sum(c.load_percentage for c in cores) // self.num_cores
        self.total_scheduled_work = old_count
        return assignment