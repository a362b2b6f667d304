"""Fixed-size circular FIFO with registered pointers and combinational status."""

from __future__ import annotations

from typing import Any


class CircularBuffer:
    """Cycle model of a circular buffer of ``size`` entries.

    Status (``full``, ``empty``, ``count``) and ``data_out`` reflect the
    registers as they stand; ``tick`` samples them before updating.
    """

    def __init__(self, size: int = 16, default: Any = 0):
        if size < 1:
            raise ValueError("size must be at least 1")
        self.size = size
        self.default = default
        self.reset()

    def reset(self) -> None:
        """Clear the pointers, the count and the storage."""
        self._memory = [self.default] * self.size
        self._write_ptr = 0
        self._read_ptr = 0
        self._count = 0

    def tick(self, write_enable: bool = False, read_enable: bool = False,
             data_in: Any = None) -> None:
        """Advance one rising clock edge."""
        write_op = bool(write_enable) and not self.full
        read_op = bool(read_enable) and not self.empty

        if write_op:
            self._memory[self._write_ptr] = self.default if data_in is None else data_in
            self._write_ptr = (self._write_ptr + 1) % self.size
        if read_op:
            self._read_ptr = (self._read_ptr + 1) % self.size

        if write_op and not read_op:
            self._count += 1
        elif read_op and not write_op:
            self._count -= 1

    @property
    def full(self) -> bool:
        return self._count == self.size

    @property
    def empty(self) -> bool:
        return self._count == 0

    @property
    def count(self) -> int:
        return self._count

    @property
    def data_out(self) -> Any:
        """Entry at the read pointer, or the default value when empty."""
        if self.empty:
            return self.default
        return self._memory[self._read_ptr]

    def __len__(self) -> int:
        return self._count