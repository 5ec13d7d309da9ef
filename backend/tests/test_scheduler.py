from memorygame.services.games.scheduler import BackgroundScheduler, ManualScheduler


def test_manual_scheduler_runs_in_due_then_schedule_order():
    scheduler = ManualScheduler()
    calls = []
    scheduler.call_later(1.0, lambda: calls.append('b'))
    scheduler.call_later(0.75, lambda: calls.append('a'))
    scheduler.call_later(1.0, lambda: calls.append('c'))

    assert scheduler.advance(0.5) == 0
    assert scheduler.advance(1.0) == 3
    assert calls == ['a', 'b', 'c']
    assert scheduler.now() == 1.5
    assert scheduler.pending == 0


def test_manual_scheduler_sets_clock_to_due_time():
    scheduler = ManualScheduler(start=100.0)
    seen = []
    scheduler.call_later(2.0, lambda: seen.append(scheduler.now()))
    scheduler.advance(10)
    assert seen == [102.0]
    assert scheduler.now() == 110.0


def test_callbacks_scheduled_while_advancing_run_in_same_window():
    scheduler = ManualScheduler()
    calls = []

    def first():
        calls.append('first')
        scheduler.call_later(1.0, lambda: calls.append('second'))
        scheduler.call_later(5.0, lambda: calls.append('late'))

    scheduler.call_later(1.0, first)
    scheduler.advance(3)
    assert calls == ['first', 'second']
    assert scheduler.pending == 1


def test_zero_delay_waits_for_advance():
    scheduler = ManualScheduler()
    calls = []
    scheduler.call_later(0, lambda: calls.append(1))
    assert calls == []
    scheduler.advance()
    assert calls == [1]


class FakeSocketIO:
    def __init__(self):
        self.slept = []

    def sleep(self, seconds):
        self.slept.append(seconds)

    def start_background_task(self, target, *args, **kwargs):
        target(*args, **kwargs)


def test_background_scheduler_sleeps_then_calls():
    sio = FakeSocketIO()
    scheduler = BackgroundScheduler(sio, clock=lambda: 42.0)
    calls = []
    scheduler.call_later(0.5, lambda: calls.append('done'))
    assert sio.slept == [0.5]
    assert calls == ['done']
    assert scheduler.now() == 42.0


def test_background_scheduler_logs_failures():
    sio = FakeSocketIO()
    scheduler = BackgroundScheduler(sio)

    def broken():
        raise RuntimeError('boom')

    scheduler.call_later(-1, broken)
    assert sio.slept == [0.0]
