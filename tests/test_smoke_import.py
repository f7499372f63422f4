from importlib import import_module


def test_imports():
    for mod in [
        "bitedesk.app",
        "bitedesk.cli",
        "bitedesk.headless",
        "bitedesk.engine.aggregate",
        "bitedesk.engine.reschedule",
        "bitedesk.report.txt_writer",
        "bitedesk.logs.rotating",
    ]:
        module = import_module(mod)
        assert module is not None

    dates = import_module("bitedesk.cases.dates")
    assert hasattr(dates, "dev_override_date")
