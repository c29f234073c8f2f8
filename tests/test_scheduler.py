"""Tests for the frame-driven scheduler."""

from __future__ import annotations

from lightbox.scheduler import Scheduler


class TestScheduler:
    def test_runs_only_when_due(self, scheduler, clock) -> None:
        fired = []
        scheduler.call_later(300, lambda: fired.append(1))
        assert scheduler.run_due() == 0
        clock.advance_ms(250)
        assert scheduler.run_due() == 0
        clock.advance_ms(100)
        assert scheduler.run_due() == 1
        assert fired == [1]

    def test_runs_once(self, scheduler, clock) -> None:
        fired = []
        call = scheduler.call_later(10, lambda: fired.append(1))
        clock.advance_ms(20)
        scheduler.run_due()
        scheduler.run_due()
        assert fired == [1]
        assert call.fired and not call.pending

    def test_cancel(self, scheduler, clock) -> None:
        fired = []
        call = scheduler.call_later(10, lambda: fired.append(1))
        assert call.cancel()
        assert not call.cancel()
        clock.advance_ms(20)
        assert scheduler.run_due() == 0
        assert fired == []

    def test_order_by_due_time(self, scheduler, clock) -> None:
        order = []
        scheduler.call_later(30, lambda: order.append("late"))
        scheduler.call_later(10, lambda: order.append("early"))
        clock.advance_ms(50)
        scheduler.run_due()
        assert order == ["early", "late"]

    def test_failing_callback_does_not_stop_others(self, scheduler, clock) -> None:
        fired = []

        def boom() -> None:
            raise ValueError("boom")

        scheduler.call_later(5, boom, label="boom")
        scheduler.call_later(6, lambda: fired.append(1))
        clock.advance_ms(10)
        assert scheduler.run_due() == 2
        assert fired == [1]

    def test_pending_count_and_next_due(self, scheduler, clock) -> None:
        a = scheduler.call_later(100, lambda: None)
        scheduler.call_later(200, lambda: None)
        assert scheduler.pending_count == 2
        assert scheduler.next_due() == a.due
        a.cancel()
        assert scheduler.pending_count == 1
        scheduler.clear()
        assert scheduler.pending_count == 0
        assert scheduler.next_due() is None

    def test_negative_delay_is_immediate(self, clock) -> None:
        s = Scheduler(clock=clock)
        s.call_later(-50, lambda: None)
        assert s.run_due() == 1
