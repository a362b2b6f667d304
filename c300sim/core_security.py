"""Per-core tamper and side-channel attack detection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

DEVIATION_THRESHOLD = 10
_BASELINE_TRACKING_LIMIT = 100
_COUNTER_MAX = 255
_LOCKDOWN_CYCLES = 1000


class SecurityLevel(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4


class SensorChannel:
    """One monitored quantity with a tracking baseline and a deviation counter."""

    def __init__(self, reset_baseline: int, low: int, high: int, band: int):
        self.reset_baseline = reset_baseline
        self.low = low
        self.high = high
        self.band = band
        self.reset()

    def reset(self) -> None:
        self.baseline = self.reset_baseline
        self.deviation_counter = 0

    def is_anomaly(self, current: int, baseline: int) -> bool:
        """True if ``current`` is outside the absolute limits or the band around ``baseline``."""
        if current < self.low or current > self.high:
            return True
        # An unsigned baseline below the band wraps, so the lower check always trips.
        if baseline < self.band or current < baseline - self.band:
            return True
        return current > baseline + self.band

    def update(self, current: int) -> None:
        """Take one sample: track the baseline and move the deviation counter."""
        baseline = self.baseline
        counter = self.deviation_counter
        if counter < _BASELINE_TRACKING_LIMIT:
            self.baseline = (baseline * 7 + current) // 8
        if self.is_anomaly(current, baseline):
            if counter < _COUNTER_MAX:
                self.deviation_counter = counter + 1
        elif counter > 0:
            self.deviation_counter = counter - 1

    @property
    def anomaly(self) -> bool:
        return self.deviation_counter > DEVIATION_THRESHOLD


@dataclass
class SensorReadings:
    """Sensor inputs sampled on one clock edge."""

    power_monitor: bool = False
    voltage_monitor: bool = False
    temperature_monitor: bool = False
    frequency_monitor: bool = False
    power_consumption: int = 300
    voltage_level: int = 1000
    temperature_reading: int = 45
    frequency_reading: int = 1000


@dataclass(frozen=True)
class SecurityOutputs:
    tamper_detected: bool
    security_violation: bool
    side_channel_attack: bool
    power_attack_detected: bool
    timing_attack_detected: bool
    voltage_glitch_detected: bool
    temperature_attack_detected: bool
    security_level: SecurityLevel
    violation_counter: int
    security_alert: bool


class CoreSecurity:
    """Cycle model of the core security monitor."""

    def __init__(self):
        self.power = SensorChannel(300, 100, 500, 50)
        self.voltage = SensorChannel(1000, 800, 1200, 50)
        self.temperature = SensorChannel(45, 20, 85, 10)
        self.frequency = SensorChannel(1000, 900, 1100, 20)
        self.reset()

    @property
    def _channels(self):
        return (self.power, self.voltage, self.temperature, self.frequency)

    def reset(self) -> None:
        for channel in self._channels:
            channel.reset()
        self.level = SecurityLevel.LOW
        self.security_timer = 0
        self.lockdown = False
        self.total_violations = 0

    def calculate_security_level(self) -> SecurityLevel:
        """Level from the summed deviation counters, kept to 8 bits as the register is."""
        deviation_sum = sum(c.deviation_counter for c in self._channels) & 0xFF
        if deviation_sum > DEVIATION_THRESHOLD * 8:
            return SecurityLevel.CRITICAL
        if deviation_sum > DEVIATION_THRESHOLD * 4:
            return SecurityLevel.HIGH
        if deviation_sum > DEVIATION_THRESHOLD * 2:
            return SecurityLevel.MEDIUM
        return SecurityLevel.LOW

    def tick(self, enable: bool = True, readings: SensorReadings | None = None) -> None:
        """Advance one rising clock edge."""
        if not enable:
            return
        readings = readings or SensorReadings()

        any_anomaly = any(c.anomaly for c in self._channels)
        new_level = self.calculate_security_level()
        old_timer = self.security_timer

        samples = (
            (self.power, readings.power_monitor, readings.power_consumption & 0xFFFF),
            (self.voltage, readings.voltage_monitor, readings.voltage_level & 0xFFF),
            (self.temperature, readings.temperature_monitor,
             readings.temperature_reading & 0x3FF),
            (self.frequency, readings.frequency_monitor,
             readings.frequency_reading & 0xFFFF),
        )
        for channel, monitored, value in samples:
            if monitored:
                channel.update(value)

        self.level = new_level
        if new_level >= SecurityLevel.CRITICAL:
            self.security_timer = (old_timer + 1) & 0xFFFF
            if old_timer > _LOCKDOWN_CYCLES:
                self.lockdown = True
        else:
            self.security_timer = 0
            self.lockdown = False

        if any_anomaly:
            self.total_violations = (self.total_violations + 1) & 0xFFFFFFFF

    @property
    def attack_in_progress(self) -> bool:
        return any(c.deviation_counter > DEVIATION_THRESHOLD * 2 for c in self._channels)

    @property
    def outputs(self) -> SecurityOutputs:
        return SecurityOutputs(
            tamper_detected=any(c.anomaly for c in self._channels),
            security_violation=self.attack_in_progress or self.lockdown,
            side_channel_attack=self.power.anomaly or self.voltage.anomaly,
            power_attack_detected=self.power.deviation_counter > DEVIATION_THRESHOLD * 3,
            timing_attack_detected=self.frequency.anomaly,
            voltage_glitch_detected=self.voltage.deviation_counter > DEVIATION_THRESHOLD * 2,
            temperature_attack_detected=self.temperature.anomaly,
            security_level=self.level,
            violation_counter=self.total_violations,
            security_alert=self.level >= SecurityLevel.HIGH,
        )