from __future__ import annotations

from datetime import date

SYSTEM_PROMPT = (
    "You are a helpful assistant that responds with JSON only. "
    "Always include a parsedTask object."
)

NO_BUCKETS = "No buckets yet."

CLASSIFY_TASK_TEMPLATE = """You are an AI assistant that classifies student tasks into appropriate buckets.

TASK: "{task}"

EXISTING BUCKETS:
{bucket_summary}

TODAY'S DATE: {today}

INSTRUCTIONS:
1. Analyze the task to extract: assignment name, course/subject category, type (Homework/Quiz/Lab/Test/Project/Event/Reminder/Other), due date, due time, and description.
2. If the task fits an existing bucket, use its bucketId. If not, suggest a new bucket name (use the course/subject name, e.g., "APUSH", "Calculus", "English", "Computer Science").
3. Convert relative dates to absolute dates (e.g., "in 3 days" -> YYYY-MM-DD based on today's date).
4. Extract time if mentioned (e.g., "at 3pm" -> "15:00").

EXAMPLES:

Task: "APUSH reading chapter 5 due Monday"
-> {{"bucketId": "existing-apush-id" OR "newBucketName": "APUSH", "parsedTask": {{"assignmentName": "Chapter 5 Reading", "courseCategory": "APUSH", "typeTag": "Homework", "dueDate": "2024-11-18", "description": "Read chapter 5"}}}}

Task: "Math quiz on derivatives next Friday"
-> {{"newBucketName": "Mathematics", "parsedTask": {{"assignmentName": "Derivatives Quiz", "courseCategory": "Mathematics", "typeTag": "Quiz", "dueDate": "2024-11-22", "description": "Quiz covering derivatives"}}}}

Task: "English essay on Macbeth due December 1st at 11:59pm"
-> {{"newBucketName": "English", "parsedTask": {{"assignmentName": "Macbeth Essay", "courseCategory": "English", "typeTag": "Homework", "dueDate": "2024-12-01", "dueTime": "23:59", "description": "Essay on Macbeth"}}}}

Task: "CS101 project submission due in 2 weeks"
-> {{"newBucketName": "CS101", "parsedTask": {{"assignmentName": "Project Submission", "courseCategory": "CS101", "typeTag": "Project", "dueDate": "2024-11-29", "description": "Submit final project"}}}}

Task: "Study group meeting tomorrow at 2pm"
-> {{"bucketId": "events-bucket-id" OR "newBucketName": "Events", "parsedTask": {{"assignmentName": "Study Group Meeting", "typeTag": "Event", "dueDate": "2024-11-16", "dueTime": "14:00", "description": "Study group session"}}}}

Respond with ONLY valid JSON matching this schema:
{{
  "bucketId": "<existing bucket id if task fits>",
  "newBucketName": "<new bucket name if no match>",
  "parsedTask": {{
    "assignmentName": "<short title>",
    "courseCategory": "<subject/course name>",
    "typeTag": "<Homework|Quiz|Lab|Test|Project|Event|Reminder|Other>",
    "dueDate": "<YYYY-MM-DD>",
    "dueTime": "<HH:MM>",
    "description": "<brief summary>"
  }}
}}"""


def summarize_buckets(buckets: list) -> str:
    """One line per bucket: id, name and up to two example items."""
    if not buckets:
        return NO_BUCKETS

    lines = []
    for bucket in buckets:
        examples = []
        for item in bucket.items[:2]:
            label = item.assignment_name or item.raw
            if item.due_date:
                label = f"{label} due {item.due_date}"
            examples.append(label)
        lines.append(
            f"- {bucket.id}: {bucket.name} (example items: {'; '.join(examples) or 'none'})"
        )
    return "\n".join(lines)


def build_classification_prompt(task: str, buckets: list, current_date: date) -> str:
    return CLASSIFY_TASK_TEMPLATE.format(
        task=task,
        bucket_summary=summarize_buckets(buckets),
        today=current_date.strftime("%Y-%m-%d"),
    )
