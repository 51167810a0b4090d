from datetime import date, datetime

from storage.base import BucketRecord, TaskRecord
from taskbuckets.projections import UNSCHEDULED_KEY, build_bucket_view, build_calendar_view

TODAY = date(2024, 11, 15)


def _bucket(id, name, minute):
    ts = datetime(2024, 11, 1, 8, minute)
    return BucketRecord(id=id, name=name, user_id="u1", created_at=ts, updated_at=ts)


def _task(id, bucket_id, raw, due=None, minute=0, bucket_name="APUSH", assignment_name=None):
    ts = datetime(2024, 11, 2, 8, minute)
    return TaskRecord(
        id=id,
        bucket_id=bucket_id,
        bucket_name=bucket_name,
        raw=raw,
        assignment_name=assignment_name,
        description=None,
        due_date=due,
        created_at=ts,
        updated_at=ts,
    )


def test_bucket_view_orders_by_creation():
    buckets = [_bucket("b2", "APUSH", 5), _bucket("b1", "Events", 1)]
    tasks = [
        _task("t2", "b2", "second", minute=9),
        _task("t1", "b2", "first", minute=3),
    ]

    view = build_bucket_view(buckets, tasks, TODAY)

    assert [b.name for b in view] == ["Events", "APUSH"]
    assert view[0].items == []
    assert [i.id for i in view[1].items] == ["t1", "t2"]


def test_type_tag_and_priority_are_rederived():
    task = _task("t1", "b1", "history essay", assignment_name="Unit 3 Test",
                 due=datetime(2024, 11, 16, 10, 30))
    item = build_bucket_view([_bucket("b1", "APUSH", 0)], [task], TODAY)[0].items[0]
    assert item.type_tag == "Test"
    assert item.priority == "High"
    assert (item.due_date, item.due_time) == ("2024-11-16", "10:30")


def test_calendar_groups_same_day_by_creation_time():
    tasks = [
        _task("late", "b1", "quiz", due=datetime(2024, 11, 18), minute=30),
        _task("early", "b1", "lab", due=datetime(2024, 11, 18), minute=10),
        _task("none", "b1", "someday", minute=0),
    ]

    view = build_calendar_view(tasks, TODAY)

    assert list(view) == ["2024-11-18", UNSCHEDULED_KEY]
    assert [t.id for t in view["2024-11-18"]] == ["early", "late"]
    assert [t.id for t in view[UNSCHEDULED_KEY]] == ["none"]
    assert view[UNSCHEDULED_KEY][0].due_date is None


def test_calendar_orders_dates_then_times():
    tasks = [
        _task("c", "b1", "c", due=datetime(2024, 11, 20, 9, 0), minute=1),
        _task("b", "b1", "b", due=datetime(2024, 11, 18, 15, 0), minute=2),
        _task("a", "b1", "a", due=datetime(2024, 11, 18, 8, 0), minute=3),
    ]

    view = build_calendar_view(tasks, TODAY)

    assert list(view) == ["2024-11-18", "2024-11-20"]
    assert [t.id for t in view["2024-11-18"]] == ["a", "b"]
    assert view["2024-11-18"][1].due_time == "15:00"
    assert view["2024-11-20"][0].bucket_name == "APUSH"
