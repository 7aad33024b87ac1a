import json
import threading

from gazepointer.core.clock import ManualClock, MonotonicClock
from gazepointer.core.handoff import FrameHandoff
from gazepointer.core.settings import DEFAULTS, TrackerSettings


def test_settings_defaults_when_file_missing(tmp_path):
    s = TrackerSettings(str(tmp_path / "settings.json"))
    assert s.data == DEFAULTS
    assert s.blink_hold_ms() == 1200
    assert s.mapping_bounds() == (-0.1, 1.1)
    assert s.geometry_strategy() == "corner_ratio"


def test_settings_load_partial_file_and_save(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"smoothing": {"max_alpha": 0.8}}), encoding="utf-8")
    s = TrackerSettings(str(path))
    assert s.smoothing_alpha_bounds() == (0.05, 0.8)
    assert s.calibration_stage_ms() == 2000
    s.set("blink", "threshold", 0.55)
    s.save()
    assert TrackerSettings(str(path)).blink_threshold() == 0.55


def test_manual_clock():
    c = ManualClock(100)
    assert c.now_ms() == 100
    assert c.advance(33) == 133
    c.set(5)
    assert c.now_ms() == 5


def test_monotonic_clock_never_goes_back():
    c = MonotonicClock()
    a = c.now_ms()
    assert c.now_ms() >= a


def test_handoff_drops_oldest_when_full():
    h = FrameHandoff(maxsize=2)
    for i in range(5):
        h.offer(i)
    assert h.dropped == 3
    got = []
    assert h.drain(got.append) == 2
    assert got == [3, 4]
    assert h.get(timeout=0.01) is None


def test_handoff_across_threads():
    h = FrameHandoff(maxsize=100)

    def produce():
        for i in range(50):
            h.offer(i)

    t = threading.Thread(target=produce)
    t.start()
    t.join()
    got = []
    h.drain(got.append)
    assert got == list(range(50))
    assert h.pending() == 0
