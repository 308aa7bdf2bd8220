import threading

import pytest

from liftoff_sim.sync import CompletionLatch


def test_initially_closed():
    latch = CompletionLatch()
    assert not latch.released
    assert latch.wait(timeout=0.01) is False


def test_release_opens_gate():
    latch = CompletionLatch()
    latch.release()
    assert latch.released
    assert latch.wait(timeout=0.01) is True
    assert latch.error is None


def test_second_release_raises():
    latch = CompletionLatch()
    latch.release()
    with pytest.raises(RuntimeError):
        latch.release()


def test_release_with_error():
    latch = CompletionLatch()
    err = ValueError("boom")
    latch.release(err)
    assert latch.wait(0.01)
    assert latch.error is err


def test_waiter_unblocked_by_other_thread():
    latch = CompletionLatch()
    seen = []

    def producer():
        seen.append('produced')
        latch.release()

    worker = threading.Thread(target=producer)
    worker.start()
    assert latch.wait(timeout=5.0)
    worker.join()
    assert seen == ['produced']


def test_concurrent_release_only_one_succeeds():
    latch = CompletionLatch()
    errors = []

    def release():
        try:
            latch.release()
        except RuntimeError as e:
            errors.append(e)

    workers = [threading.Thread(target=release) for _ in range(8)]
    for w in workers:
        w.start()
    for w in workers:
        w.join()
    assert len(errors) == 7
