"""
Unit tests for Event and EventBus.
"""

import pytest


@pytest.mark.unit
class TestEventBus:
    """Listener registration and delivery."""

    def test_delivery_in_registration_order(self):
        from simcore.events import Event, EventBus
        bus = EventBus()
        seen = []
        bus.subscribe(lambda e: seen.append(("first", e.name)))
        bus.subscribe(lambda e: seen.append(("second", e.name)))
        bus.publish(Event("P_pump_state", None, "OFFLINE"))
        assert seen == [("first", "P_pump_state"), ("second", "P_pump_state")]
        assert bus.delivered == 1
        assert bus.listener_count == 2

    def test_publish_all_keeps_order(self):
        from simcore.events import Event, EventBus
        bus = EventBus()
        seen = []
        bus.subscribe(lambda e: seen.append(e.new))
        bus.publish_all([Event("a", None, 1), Event("a", 1, 2), Event("a", 2, 3)])
        assert seen == [1, 2, 3]

    def test_non_callable_rejected(self):
        from simcore.events import EventBus
        with pytest.raises(ValueError):
            EventBus().subscribe("listener")

    def test_unsubscribe(self):
        from simcore.events import Event, EventBus
        bus = EventBus()
        seen = []
        listener = seen.append
        bus.subscribe(listener)
        bus.unsubscribe(listener)
        bus.unsubscribe(listener)
        bus.publish(Event("a", None, 1))
        assert seen == []
        assert bus.listener_count == 0

    def test_listener_error_propagates(self):
        from simcore.events import Event, EventBus
        bus = EventBus()
        seen = []

        def broken(event):
            raise RuntimeError("listener failed")

        bus.subscribe(broken)
        bus.subscribe(seen.append)
        with pytest.raises(RuntimeError):
            bus.publish(Event("a", None, 1))
        assert seen == []
        assert bus.delivered == 0

    def test_event_equality(self):
        from simcore.events import Event
        assert Event("a", None, True) == Event("a", None, True)
        assert Event("a", None, True) != Event("a", False, True)
