# tests/test_sinks.py
# What this covers:
#   - LogNotifier writes one structured line per event, with fingerprint, without the card
#   - FanoutNotifier keeps calling later sinks when an earlier one raises

from structlog.testing import capture_logs

from app.notify.sinks import CollectingNotifier, FanoutNotifier, LogNotifier, Notifier


def test_log_notifier_emits_structured_line(sample_events):
    ev = sample_events[0]
    with capture_logs() as logs:
        LogNotifier()(ev)

    assert len(logs) == 1
    line = logs[0]
    assert line["event"] == "event.notified"
    assert line["log_level"] == "info"
    assert line["fp"] == ev.fingerprint()
    assert line["orderType"] == "Purchase"
    assert line["websiteUrl"] == "https://amazon.com"
    assert "card" not in line


def test_log_notifier_custom_event_name(sample_events):
    with capture_logs() as logs:
        LogNotifier(event_name="order.seen")(sample_events[1])
    assert [l["event"] for l in logs] == ["order.seen"]


def test_fanout_continues_after_failing_sink(sample_events):
    before, after = CollectingNotifier(), CollectingNotifier()

    def broken(ev):
        raise RuntimeError("sink down")

    fan = FanoutNotifier(before, broken, after)
    with capture_logs() as logs:
        for ev in sample_events:
            fan(ev)

    assert before.events == sample_events
    assert after.events == sample_events
    errs = [l for l in logs if l["event"] == "notify.sink.error"]
    assert len(errs) == 3
    assert errs[0]["log_level"] == "warning"
    assert errs[0]["err"] == "sink down"


def test_sinks_satisfy_protocol():
    assert isinstance(LogNotifier(), Notifier)
    assert isinstance(CollectingNotifier(), Notifier)
    assert isinstance(FanoutNotifier(), Notifier)
