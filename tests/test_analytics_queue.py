import threading

from analytics_queue import AnalyticsQueue


def test_jobs_run_in_order():
    seen = []
    q = AnalyticsQueue(maxsize=10)
    for n in range(5):
        assert q.submit(seen.append, n)
    q.join()
    q.stop()
    assert seen == [0, 1, 2, 3, 4]


def test_full_queue_drops_without_blocking():
    q = AnalyticsQueue(maxsize=1, autostart=False)
    assert q.submit(print, "first")
    assert not q.submit(print, "second")
    assert q.dropped == 1
    assert q.pending == 1


def test_failing_job_does_not_stop_the_worker():
    seen = []

    def explode():
        raise RuntimeError("analytics store down")

    q = AnalyticsQueue(maxsize=10)
    q.submit(explode)
    q.submit(seen.append, "after")
    q.join()
    q.stop()
    assert q.failed == 1
    assert seen == ["after"]


def test_jobs_run_off_the_calling_thread():
    threads = []
    q = AnalyticsQueue(maxsize=10)
    q.submit(lambda: threads.append(threading.current_thread().name))
    q.join()
    q.stop()
    assert threads == ["analytics-worker"]


def test_keyword_arguments_are_passed():
    seen = {}
    q = AnalyticsQueue(maxsize=10)
    q.submit(seen.update, industry="tech")
    q.join()
    q.stop()
    assert seen == {"industry": "tech"}
