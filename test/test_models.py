from taskbuckets.models import VALID_TASK_TYPES, AssignmentOutcome, TaskItem, TaskUpdate


def test_task_item_defaults():
    t = TaskItem(id="t1", raw="read")
    assert t.type_tag == "Other"
    assert t.priority == "Low"
    assert t.due_time is None


def test_task_update_tracks_sent_fields():
    u = TaskUpdate(description="  new text  ")
    assert u.description == "new text"
    assert u.model_fields_set == {"description"}

    u = TaskUpdate.model_validate({"due_date": None})
    assert "due_date" in u.model_fields_set


def test_outcome_organized():
    assert not AssignmentOutcome().organized
    assert AssignmentOutcome(task=TaskItem(id="t1", raw="read")).organized


def test_valid_task_types_follow_the_literal():
    assert VALID_TASK_TYPES == (
        "Homework", "Quiz", "Lab", "Test", "Project", "Event", "Reminder", "Other",
    )
    for tag in VALID_TASK_TYPES:
        assert TaskItem(id="t1", raw="x", type_tag=tag).type_tag == tag
