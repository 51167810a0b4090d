from datetime import date, datetime

import pytest

from classification.task_type import categorize_task_type, derive_priority

TODAY = date(2024, 11, 15)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("finish math homework", "Homework"),
        ("hw 3 problems 1-10", "Homework"),
        ("Bio quiz on cells", "Quiz"),
        ("chem lab writeup", "Lab"),
        ("physics midterm", "Test"),
        ("final exam review", "Test"),
        ("group project slides", "Project"),
        ("club meeting after school", "Event"),
        ("remember to bring calculator", "Reminder"),
        ("buy milk", "Other"),
    ],
)
def test_keyword_groups(text, expected):
    assert categorize_task_type(text) == expected


def test_quiz_only_is_quiz():
    assert categorize_task_type("spanish vocab quiz friday") == "Quiz"


def test_earlier_group_wins_on_overlap():
    # both a Homework and a Quiz keyword
    assert categorize_task_type("homework and quiz prep") == "Homework"
    # Test ("test") outranks Event ("practice")
    assert categorize_task_type("practice test for SAT") == "Test"


def test_parsed_fields_are_considered():
    assert categorize_task_type("APUSH chapter 5", assignment_name="Reading Quiz") == "Quiz"
    assert categorize_task_type("APUSH chapter 5", description="lab report") == "Lab"


def test_case_insensitive():
    assert categorize_task_type("PROJECT proposal") == "Project"


def test_lab_needs_word_end():
    assert categorize_task_type("label the diagram") == "Other"


def test_priority_from_due_date():
    assert derive_priority("x", None, None, datetime(2024, 11, 15, 23, 0), TODAY) == "High"
    assert derive_priority("x", None, None, datetime(2024, 11, 16), TODAY) == "High"
    assert derive_priority("x", None, None, datetime(2024, 11, 19), TODAY) == "Medium"
    assert derive_priority("x", None, None, datetime(2024, 11, 20), TODAY) == "Low"
    # overdue
    assert derive_priority("x", None, None, datetime(2024, 11, 1), TODAY) == "High"


def test_priority_from_keywords_without_due_date():
    assert derive_priority("email teacher ASAP", None, None, None, TODAY) == "High"
    assert derive_priority("study", "Midterm prep", None, None, TODAY) == "Medium"
    assert derive_priority("buy milk", None, None, None, TODAY) == "Low"
