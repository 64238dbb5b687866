from studyvault.services.assignment_extractor import (
    clean_assignment_title,
    extract_assignments,
    extract_from_structured_lists,
)


WEEKLY_SCHEDULE = """
Final project proposal
Week 1 - 9/2
Module 1 Discussion post
Reading quiz on chapter 1
Week 2 - 9/9/2025
Lab report worksheet
"""


def test_inline_dates_end_to_end():
    records = extract_assignments("3/10/25 Module 1 Discussion\n3/17 Quiz 1\n", "Spring 2025")

    assert [(r.title, r.due_date, r.tags) for r in records] == [
        ("Module 1 Discussion", "2025-03-10", ["Discussion"]),
        ("Quiz 1", "2025-03-17", ["Quiz"]),
    ]
    assert all(r.status == "pending" for r in records)
    assert records[1].description == "Quiz assessment: Quiz 1"


def test_inline_lines_need_a_keyword():
    records = extract_assignments("9/1 Labor Day - no class\n9/8 Reading: chapter 2\n", "Fall 2025")
    # "Labor" contains "lab"; the reading line has no keyword
    assert [r.title for r in records] == ["Labor Day - no class"]


def test_structured_list_uses_most_recent_date():
    records = extract_assignments(WEEKLY_SCHEDULE, "Fall 2025")

    assert [(r.title, r.due_date) for r in records] == [
        ("Final project proposal", None),
        ("Module 1 Discussion post", "2025-09-02"),
        ("Reading quiz on chapter 1", "2025-09-02"),
        ("Lab report worksheet", "2025-09-09"),
    ]
    assert records[3].tags == ["Lab", "Worksheet"]


def test_inline_results_suppress_structured_scan():
    text = "Week 1 - 9/2\nModule 1 Discussion post\n9/5 Homework 1\n"
    records = extract_assignments(text, "Fall 2025")
    assert [r.title for r in records] == ["Homework 1"]


def test_structured_scan_skips_short_lines():
    lines = ["9/2", "Quiz 1", "Lab", "Quiz on loops and lists"]
    records = extract_from_structured_lists(lines, "Fall 2025")
    assert [r.title for r in records] == ["Quiz on loops and lists"]


def test_short_titles_are_discarded():
    assert extract_assignments("3/10 Lab\n", "Spring 2025") == []


def test_text_without_assignments_is_empty():
    text = "Office hours: Tuesdays 2-4pm\nGrading is out of 100 points.\n"
    assert extract_assignments(text, "Spring 2025") == []


def test_clean_assignment_title():
    assert clean_assignment_title("3/10/25   Module  1 \t Discussion ") == "Module 1 Discussion"
    assert clean_assignment_title("Essay draft") == "Essay draft"
