from c300sim.core_security import (
    CoreSecurity,
    SecurityLevel,
    SensorChannel,
    SensorReadings,
)


def _power_channel():
    return SensorChannel(300, 100, 500, 50)


def _all_monitored(**values):
    return SensorReadings(
        power_monitor=True,
        voltage_monitor=True,
        temperature_monitor=True,
        frequency_monitor=True,
        **values,
    )


def test_is_anomaly_limits():
    ch = _power_channel()
    assert ch.is_anomaly(300, 300) is False
    assert ch.is_anomaly(350, 300) is False
    assert ch.is_anomaly(351, 300) is True
    assert ch.is_anomaly(249, 300) is True
    assert ch.is_anomaly(99, 100) is True
    assert ch.is_anomaly(501, 480) is True


def test_baseline_below_band_always_anomalous():
    ch = SensorChannel(0, 0, 100, 10)
    assert ch.is_anomaly(5, 5) is True


def test_update_counts_up_and_down():
    ch = _power_channel()
    ch.update(0)
    ch.update(0)
    assert ch.deviation_counter == 2
    ch.reset()
    ch.update(300)
    assert ch.deviation_counter == 0


def test_anomaly_after_threshold():
    ch = _power_channel()
    for _ in range(10):
        ch.update(0)
    assert ch.anomaly is False
    ch.update(0)
    assert ch.anomaly is True


def test_baseline_frozen_after_many_deviations():
    ch = _power_channel()
    for _ in range(100):
        ch.update(0)
    frozen = ch.baseline
    ch.update(0)
    assert ch.baseline == frozen
    assert ch.deviation_counter == 101


def test_counter_saturates():
    ch = _power_channel()
    for _ in range(300):
        ch.update(0)
    assert ch.deviation_counter == 255


def test_nominal_readings_are_quiet():
    sec = CoreSecurity()
    for _ in range(20):
        sec.tick(readings=_all_monitored())
    out = sec.outputs
    assert out.tamper_detected is False
    assert out.security_violation is False
    assert out.security_level == SecurityLevel.LOW
    assert out.violation_counter == 0


def test_power_attack_progression():
    sec = CoreSecurity()
    attack = SensorReadings(power_monitor=True, power_consumption=0)
    for _ in range(11):
        sec.tick(readings=attack)
    out = sec.outputs
    assert out.tamper_detected is True
    assert out.side_channel_attack is True
    assert out.violation_counter == 0
    sec.tick(readings=attack)
    assert sec.outputs.violation_counter == 1


def test_power_attack_levels():
    sec = CoreSecurity()
    attack = SensorReadings(power_monitor=True, power_consumption=0)
    for _ in range(30):
        sec.tick(readings=attack)
    out = sec.outputs
    assert out.security_level == SecurityLevel.MEDIUM
    assert out.security_violation is True
    assert out.power_attack_detected is False
    assert out.security_alert is False
    sec.tick(readings=attack)
    assert sec.outputs.power_attack_detected is True


def test_disabled_tick_changes_nothing():
    sec = CoreSecurity()
    attack = SensorReadings(power_monitor=True, power_consumption=0)
    for _ in range(15):
        sec.tick(enable=False, readings=attack)
    assert sec.power.deviation_counter == 0
    assert sec.outputs.tamper_detected is False


def test_unmonitored_channels_ignored():
    sec = CoreSecurity()
    quiet = SensorReadings(power_consumption=0)
    for _ in range(15):
        sec.tick(readings=quiet)
    assert sec.power.deviation_counter == 0


def test_security_level_sum_wraps_to_eight_bits():
    sec = CoreSecurity()
    for ch in (sec.power, sec.voltage, sec.temperature, sec.frequency):
        ch.deviation_counter = 64
    assert sec.calculate_security_level() == SecurityLevel.LOW


def test_security_level_critical():
    sec = CoreSecurity()
    for ch in (sec.power, sec.voltage, sec.temperature, sec.frequency):
        ch.deviation_counter = 25
    assert sec.calculate_security_level() == SecurityLevel.CRITICAL


def test_lockdown_after_sustained_critical():
    sec = CoreSecurity()
    for ch in (sec.power, sec.voltage, sec.temperature, sec.frequency):
        ch.deviation_counter = 25
    for _ in range(1001):
        sec.tick()
    assert sec.lockdown is False
    sec.tick()
    assert sec.lockdown is True
    assert sec.outputs.security_violation is True
    assert sec.outputs.security_alert is True


def test_reset_restores_defaults():
    sec = CoreSecurity()
    attack = SensorReadings(power_monitor=True, power_consumption=0)
    for _ in range(20):
        sec.tick(readings=attack)
    sec.reset()
    assert sec.power.deviation_counter == 0
    assert sec.power.baseline == 300
    assert sec.total_violations == 0
    assert sec.outputs.security_level == SecurityLevel.LOW