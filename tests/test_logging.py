import logging

from parallax_window.utils import ManualClock, ThrottledLogger


def test_throttled_logger_emits_once_per_interval(caplog):
    clock = ManualClock()
    throttled = ThrottledLogger(logging.getLogger("parallax.test"), interval_sec=1.0, clock=clock)

    with caplog.at_level(logging.WARNING, logger="parallax.test"):
        assert throttled.warning("frustum invalid (%s)", "too close")
        for _ in range(3):
            clock.advance(0.25)
            assert not throttled.warning("frustum invalid (%s)", "too close")
        clock.advance(0.25)
        assert throttled.warning("frustum invalid (%s)", "too close")

    messages = [r.getMessage() for r in caplog.records]
    assert messages == ["[x1] frustum invalid (too close)", "[x4] frustum invalid (too close)"]
