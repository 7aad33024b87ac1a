import importlib


def test_processor_callable():
    from gazepointer.core.processor import FrameProcessor
    assert callable(FrameProcessor)


def test_import_click_machine():
    from gazepointer.control.click import ClickStateMachine  # noqa: F401


def test_calibration_module_discoverable():
    spec = importlib.util.find_spec("gazepointer.calibration.stages")
    assert spec is not None, "calibration.stages module should be discoverable"
