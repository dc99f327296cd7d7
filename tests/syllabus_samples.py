"""
Shared syllabus text for the parsing and API tests.

With a start date of 2024-01-08 the regex path yields:
- Assignment "Homework 1 due Week 2"      -> 2024-01-15
- Exam "Midterm Exam on March 4, 2024"     -> 2024-03-04
- Project "Final Project due 04/29/2024"   -> 2024-04-29
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

START_DATE = "2024-01-08"

SAMPLE_SYLLABUS = """# CS 101 - Introduction to Programming
Spring 2024

Instructor: Jane Doe
Email: jane.doe@example.edu
Office Hours: Tue/Thu 1-2pm

Required Textbook: Python Crash Course, by Eric Matthes

Grading
Homework: 20%
Exams: 50%
Participation: 30%

Schedule
Week 1: Variables and types
Homework 1 due Week 2
Midterm Exam on March 4, 2024
Final Project due 04/29/2024
"""

MODEL_PAYLOAD = {
    "course": "CS 101 - Introduction to Programming",
    "startDate": "2023-09-01",
    "academicTerm": "Spring 2024",
    "instructor": {"name": "Jane Doe", "email": "jane.doe@example.edu", "officeHours": None},
    "textbooks": [{"title": "Python Crash Course", "author": "Eric Matthes", "isbn": None}],
    "gradingWeights": [
        {"category": "Homework", "weightPercent": 20},
        {"category": "Exams", "weightPercent": "50%"},
        {"category": "Participation", "weight": 30},
    ],
    "events": [
        {"type": "assignment", "title": "Homework 1", "dueDate": None, "weekReference": "Week 2"},
        {"type": "EXAM", "title": "Midterm Exam", "dueDate": "2024-03-04", "weekReference": None},
        {"type": "Project", "title": "Final Project", "dueDate": "TBD", "weekReference": None},
    ],
}


def fake_openai_client(content):
    """
    Stand-in for openai.OpenAI: chat.completions.create returns `content`
    (a dict is sent as JSON) and records its kwargs on the mock.
    """
    if isinstance(content, dict):
        content = json.dumps(content)
    client = MagicMock()
    client.chat.completions.create.return_value = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )
    return client
