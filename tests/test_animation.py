import logging

from animation import Animation, FrameScheduler


def test_animation_redraws_every_tick():
    scheduler = FrameScheduler()
    seen = []
    anim = Animation(scheduler, seen.append, name='probe')
    anim.start()
    for t in (16.0, 33.0, 50.0):
        scheduler.tick(t)
    assert seen == [16.0, 33.0, 50.0]
    assert anim.frames == 3
    assert anim.running


def test_callbacks_registered_during_tick_wait_for_next_tick():
    scheduler = FrameScheduler()
    calls = []

    def callback(t):
        calls.append(t)
        scheduler.schedule_next_frame(callback)

    scheduler.schedule_next_frame(callback)
    scheduler.tick(1.0)
    assert calls == [1.0]
    assert len(scheduler) == 1


def test_start_twice_registers_once():
    scheduler = FrameScheduler()
    anim = Animation(scheduler, lambda t: None)
    anim.start()
    anim.start()
    assert len(scheduler) == 1


def test_stop_cancels_pending_frame():
    scheduler = FrameScheduler()
    seen = []
    anim = Animation(scheduler, seen.append)
    anim.start()
    scheduler.tick(1.0)
    anim.stop()
    assert not anim.running
    assert len(scheduler) == 0
    scheduler.tick(2.0)
    assert seen == [1.0]


def test_stop_from_inside_a_frame():
    scheduler = FrameScheduler()
    holder = {}
    anim = Animation(scheduler, lambda t: holder['anim'].stop())
    holder['anim'] = anim
    anim.start()
    scheduler.tick(1.0)
    assert anim.frames == 1
    assert not anim.running
    assert len(scheduler) == 0


def test_failing_animation_does_not_stop_the_other(caplog):
    scheduler = FrameScheduler()

    def broken(t):
        raise RuntimeError('no surface')

    seen = []
    bad = Animation(scheduler, broken, name='ring')
    good = Animation(scheduler, seen.append, name='dome')
    bad.start()
    good.start()

    with caplog.at_level(logging.ERROR, logger='animation'):
        for t in (10.0, 20.0, 30.0):
            scheduler.tick(t)

    assert seen == [10.0, 20.0, 30.0]
    assert good.running
    assert not bad.running
    assert bad.frames == 0
    assert len(caplog.records) == 1
    assert 'no surface' in caplog.text
