"""Network quality-of-service: priority queues, weighted scheduling and congestion checks."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import IntEnum

_MASK32 = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1

QUEUE_SLOTS = 64
QUEUE_CAPACITY = QUEUE_SLOTS - 1
NUM_PRIORITIES = 5
MAX_PAYLOAD = 1024
HASH_SIZE = 32
MAX_CORE_ID = 300
BANDWIDTH_WINDOW = 1000
LATENCY_WINDOW = 10000
CONGESTION_UTILIZATION = 85
CONTROLLER_INSTANCES = 4


class QoSPriority(IntEnum):
    CRITICAL = 0
    HIGH = 1
    MEDIUM = 2
    LOW = 3
    BACKGROUND = 4


@dataclass
class Packet:
    """A network packet with a 32-byte security hash and up to 1024 payload bytes."""

    src_core_id: int = 0
    dst_address: int = 0
    packet_size: int = 0
    priority: QoSPriority = QoSPriority.MEDIUM
    security_hash: bytes = bytes(HASH_SIZE)
    payload: bytes = b""
    timestamp: int = 0
    valid: bool = False

    def __post_init__(self) -> None:
        if len(self.payload) > MAX_PAYLOAD:
            raise ValueError(f"payload may hold at most {MAX_PAYLOAD} bytes")
        if len(self.security_hash) > HASH_SIZE:
            raise ValueError(f"security_hash may hold at most {HASH_SIZE} bytes")
        self.priority = QoSPriority(self.priority)


@dataclass
class QoSConfig:
    bandwidth_limit_mbps: int = 1000
    max_latency_us: int = 100
    buffer_size_packets: int = 256
    priority_weights: tuple[int, ...] = (40, 30, 20, 8, 2)
    congestion_control_enabled: bool = True

    def __post_init__(self) -> None:
        self.priority_weights = tuple(self.priority_weights)
        if len(self.priority_weights) != NUM_PRIORITIES:
            raise ValueError(f"priority_weights needs {NUM_PRIORITIES} entries")
        if any(not 0 <= w <= 0xFF for w in self.priority_weights):
            raise ValueError("priority weights must fit in 8 bits")


@dataclass
class QoSStatistics:
    packets_processed: int = 0
    packets_dropped: int = 0
    bytes_transmitted: int = 0
    current_latency_us: int = 0
    current_bandwidth_mbps: int = 0
    queue_utilization_percent: int = 0


def _rotl32(value: int) -> int:
    return ((value << 1) | (value >> 31)) & _MASK32


def packet_hash(payload: bytes) -> int:
    """Rolling 32-bit hash: XOR each byte in, then rotate left by one."""
    value = 0
    for byte in payload:
        value = _rotl32(value ^ byte)
    return value


def validate_packet_security(packet: Packet) -> bool:
    """Check the packet's structure and that its stored hash matches the payload.

    The stored hash is the first four bytes of ``security_hash``, little-endian.
    """
    if not packet.valid:
        return False
    size = packet.packet_size
    if size == 0 or size > MAX_PAYLOAD:
        return False
    if packet.src_core_id >= MAX_CORE_ID:
        return False
    data = packet.payload[:size].ljust(size, b"\0")
    stored = int.from_bytes(packet.security_hash[:4].ljust(4, b"\0"), "little")
    return packet_hash(data) == stored


class NetworkQoS:
    """Cycle model of one QoS unit with five priority queues."""

    def __init__(self, config: QoSConfig | None = None):
        self.config = config or QoSConfig()
        self._stats = QoSStatistics()
        self._priority_counter = [0] * NUM_PRIORITIES
        self._bandwidth_timer = 0
        self._latency_timer = 0
        self.output: deque[Packet] = deque()
        self.reset()

    def reset(self) -> None:
        """Apply the active-low reset to the counters and queues."""
        self.bandwidth_counter = 0
        self.latency_accumulator = 0
        self.packet_counter = 0
        self.qos_active = False
        self.ready = False
        self.congestion_detected = False
        self._queues: list[deque[Packet]] = [deque() for _ in range(NUM_PRIORITIES)]

    @property
    def statistics(self) -> QoSStatistics:
        """A snapshot of the statistics registers."""
        return replace(self._stats)

    def queue_length(self, priority: QoSPriority) -> int:
        return len(self._queues[QoSPriority(priority)])

    def classify(self, packet: Packet) -> bool:
        """Queue ``packet`` by its priority; False if that queue is full."""
        queue = self._queues[packet.priority]
        if len(queue) >= QUEUE_CAPACITY:
            return False
        queue.append(packet)
        return True

    def transmit_from_queue(self, priority: QoSPriority) -> Packet | None:
        """Send the oldest packet of one priority, if there is one."""
        queue = self._queues[QoSPriority(priority)]
        if not queue:
            return None
        packet = queue.popleft()
        self.output.append(packet)
        self._stats.bytes_transmitted = (
            self._stats.bytes_transmitted + packet.packet_size) & _MASK64
        self.bandwidth_counter = (self.bandwidth_counter + packet.packet_size) & _MASK32
        return packet

    def schedule(self) -> Packet | None:
        """Weighted round robin: send at most one packet, favouring higher priorities."""
        weights = self.config.priority_weights
        sent = None
        for priority in QoSPriority:
            if self._priority_counter[priority] < weights[priority]:
                sent = self.transmit_from_queue(priority)
                if sent is not None:
                    self._priority_counter[priority] = (
                        self._priority_counter[priority] + 1) & 0xFF
                    break
        if all(c >= w for c, w in zip(self._priority_counter, weights)):
            self._priority_counter = [0] * NUM_PRIORITIES
        return sent

    def queue_utilization(self) -> int:
        """Queued packets as a percentage of all queue slots."""
        total = sum(len(q) for q in self._queues)
        return total * 100 // (QUEUE_SLOTS * NUM_PRIORITIES)

    def detect_congestion(self) -> bool:
        """Flag congestion on bandwidth, latency or queue utilisation."""
        stats, config = self._stats, self.config
        congestion = (
            stats.current_bandwidth_mbps > config.bandwidth_limit_mbps * 90 // 100
            or stats.current_latency_us > config.max_latency_us
            or stats.queue_utilization_percent > CONGESTION_UTILIZATION
        )
        self.congestion_detected = congestion
        return congestion

    def _monitor_bandwidth(self) -> None:
        self._bandwidth_timer += 1
        if self._bandwidth_timer >= BANDWIDTH_WINDOW:
            self._stats.current_bandwidth_mbps = (self.bandwidth_counter * 8 // 1024) & _MASK32
            self.bandwidth_counter = 0
            self._bandwidth_timer = 0

    def _monitor_latency(self) -> None:
        if self.packet_counter > 0:
            self._stats.current_latency_us = self.latency_accumulator // self.packet_counter
        self._latency_timer += 1
        if self._latency_timer >= LATENCY_WINDOW:
            self.latency_accumulator = 0
            self.packet_counter = 0
            self._latency_timer = 0

    def tick(self, enable: bool = True, packet: Packet | None = None) -> Packet | None:
        """Advance one rising clock edge; return the packet transmitted, if any."""
        sent = None
        if enable:
            self.qos_active = True
            self.ready = True
            if packet is not None:
                if validate_packet_security(packet):
                    self.classify(packet)
                    self._stats.packets_processed = (
                        self._stats.packets_processed + 1) & _MASK64
                else:
                    self._stats.packets_dropped = (
                        self._stats.packets_dropped + 1) & _MASK64
            sent = self.schedule()
            self.detect_congestion()
        else:
            self.qos_active = False
            self.ready = False

        self._monitor_bandwidth()
        self._monitor_latency()
        self._stats.queue_utilization_percent = self.queue_utilization()
        return sent


class QoSController:
    """Aggregates readiness, congestion and statistics over several QoS units."""

    def __init__(self, instances: Sequence[NetworkQoS] | None = None):
        if instances is None:
            instances = [NetworkQoS() for _ in range(CONTROLLER_INSTANCES)]
        if not instances:
            raise ValueError("at least one QoS instance is required")
        self.instances = list(instances)
        self.all_ready = False
        self.any_congestion = False

    def aggregate(self) -> QoSStatistics:
        """Combine the instances' flags and sum their packet and byte counters.

        The averaged rate fields start from zero and are never accumulated,
        so they are reported as zero.
        """
        self.all_ready = all(q.ready for q in self.instances)
        self.any_congestion = any(q.congestion_detected for q in self.instances)
        total = QoSStatistics()
        for qos in self.instances:
            stats = qos.statistics
            total.packets_processed = (total.packets_processed + stats.packets_processed) & _MASK64
            total.packets_dropped = (total.packets_dropped + stats.packets_dropped) & _MASK64
            total.bytes_transmitted = (total.bytes_transmitted + stats.bytes_transmitted) & _MASK64
        count = len(self.instances)
        total.current_latency_us //= count
        total.current_bandwidth_mbps //= count
        total.queue_utilization_percent //= count
        return total