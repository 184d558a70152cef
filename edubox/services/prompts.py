"""
Prompt templates for EduBox generation routes.
Every builder is deterministic: same inputs, same (system_instruction, prompt) pair.
Malformed options are ignored rather than rejected.
"""
import json
from dataclasses import dataclass
from typing import Any

STUDY_PLAN_TITLE = "study_plan_title"


@dataclass(frozen=True)
class BuiltPrompt:
    system_instruction: str
    prompt: str


def _as_options(options: Any) -> dict[str, Any]:
    return options if isinstance(options, dict) else {}


def _is_number(value: Any) -> bool:
    # bool is an int subclass; a JSON true is not a word count
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _option_requirements(options: dict[str, Any] | None) -> list[str]:
    options = _as_options(options)
    if not options:
        return []
    parts = []
    word_count = options.get("wordCount")
    if word_count and _is_number(word_count):
        parts.append(f"Aim for approximately {word_count} words")
    tone = options.get("tone")
    if tone and isinstance(tone, str):
        parts.append(f"Use a {tone.lower()} tone throughout the content")
    return parts


# ---- Content generator ----

def build_content_prompt(prompt: str, content_type: str | None, options: dict[str, Any] | None) -> BuiltPrompt:
    system_instruction = (
        f"You are EduBox Content Generator. Produce a {content_type or 'content'} "
        "tailored for a college student."
    )
    requirements = _option_requirements(options)
    if requirements:
        system_instruction += f" Important requirements: {'. '.join(requirements)}."
    system_instruction += (
        " Be comprehensive yet concise, well-structured, and directly address the user's request."
    )
    return BuiltPrompt(system_instruction=system_instruction, prompt=prompt)


def content_record_title(content_type: str | None, options: dict[str, Any] | None) -> str:
    title = _as_options(options).get("title")
    if isinstance(title, str) and title:
        return title
    return content_type or "AI Content"


# ---- Study planner ----

STUDY_PLAN_SYSTEM_INSTRUCTION = (
    "You are EduBox Study Planner. Produce a helpful, step-by-step study plan aimed at a college "
    "student. Favor slightly longer, concrete recommendations with next-step actions and example exercises."
)

STUDY_TITLE_SYSTEM_INSTRUCTION = (
    "You are an assistant that creates short titles for study plans. Return only a single short title."
)


def build_study_prompt(context: str | None, options: dict[str, Any] | None) -> BuiltPrompt:
    options = _as_options(options)
    user_prompt = options.get("userPrompt")
    user_prompt_note = f"\n\nUser request: {user_prompt}" if user_prompt and isinstance(user_prompt, str) else ""

    if options.get("contentType") == STUDY_PLAN_TITLE:
        prompt = (
            "Generate a concise, human-friendly title (3-8 words) for the following study plan or "
            f"description:\n\n{context or ''}\n\n"
            "Only output the title on a single line. Do not include any extra commentary."
            + user_prompt_note
        )
        return BuiltPrompt(system_instruction=STUDY_TITLE_SYSTEM_INSTRUCTION, prompt=prompt)

    prompt = (
        "Create a detailed, actionable study plan for this student using the following context:\n"
        f"{context or 'No additional context provided.'}{user_prompt_note}\n\n"
        "Produce a structured plan with 3-6 recommended study sessions/tasks. For each item include:\n"
        "- A short title\n"
        "- An estimated duration (in minutes)\n"
        "- Priority (high/medium/low)\n"
        "- A one-sentence justification\n"
        "- Concrete next steps or exercises to do during the session\n\n"
        "Output the plan in Markdown, with clear headings and bullet points."
    )
    return BuiltPrompt(system_instruction=STUDY_PLAN_SYSTEM_INSTRUCTION, prompt=prompt)


def study_record_title(options: dict[str, Any] | None) -> str:
    options = _as_options(options)
    title = options.get("title")
    if isinstance(title, str) and title:
        return title
    if options.get("contentType") == "study_plan":
        return "Study Plan"
    return "Study Recommendations"


def study_record_content_type(options: dict[str, Any] | None) -> str:
    content_type = _as_options(options).get("contentType")
    if isinstance(content_type, str) and content_type:
        return content_type
    return "study_recommendations"


def raw_options_metadata(options: dict[str, Any] | None) -> dict[str, str] | None:
    """Options are stored as one JSON string so arbitrary client shapes never hit the schema."""
    if not _as_options(options):
        return None
    return {"rawOptions": json.dumps(options, separators=(",", ":"), default=str)}


# ---- Chat suggestions ----

SUGGESTIONS_SYSTEM_INSTRUCTION = "Generate short starter suggestions as a JSON array."


def build_suggestions_prompt(context_summary: str | None) -> BuiltPrompt:
    prompt = (
        "You are EduBox suggestion generator. Provide up to 5 short starter suggestions (1-6 words each) "
        "a college student might ask an academic assistant. Return the result as a JSON array of strings only. "
        f"Context: {context_summary or 'no context'}"
    )
    return BuiltPrompt(system_instruction=SUGGESTIONS_SYSTEM_INSTRUCTION, prompt=prompt)


# ---- Schedule optimizer ----

def build_schedule_prompt(
    schedule: Any,
    assignments: Any,
    events: Any,
    tasks: Any,
    study_sessions: Any,
) -> str:
    def dump(value: Any) -> str:
        return json.dumps(value, separators=(",", ":"), default=str)

    return f"""
You are a Study Schedule Optimization Assistant. Analyze the following student schedule data and create an optimized schedule:

Current Schedule: {dump(schedule)}
Assignments: {dump(assignments)}
Events: {dump(events)}
Tasks: {dump(tasks)}
Study Sessions: {dump(study_sessions)}

Please create an optimized schedule that:
1. Prioritizes high-priority assignments and tasks
2. Avoids conflicts between events and study sessions
3. Allocates appropriate time blocks for different activities
4. Includes strategic breaks for better focus and productivity
5. Balances workload throughout the day/week
6. Suggests optimal timing for study sessions based on energy levels

Return a JSON object with:
- scheduleItems: Array of optimized schedule items with id, title, type, priority, duration (in minutes), startTime, and description
- notes: Detailed explanation of the optimization strategy and recommendations

IMPORTANT: Return ONLY valid JSON without any markdown formatting, code blocks, or additional text. Do not wrap the response in ```json or any other formatting.
"""


# ---- PDF extraction (campus life) ----

def build_menu_prompt(extracted_text: str) -> str:
    return f"""
You are a helpful assistant that extracts menu information from restaurant/dining hall text.

Parse the following menu text and extract individual menu items with their details. Return the data as a JSON array where each item has:
- name: string (the dish/item name)
- description: string (optional description)
- price: number (optional price as a number, without currency symbols)
- category: string (optional category like "appetizer", "main", "dessert", "beverage")
- dietary: array of strings (optional dietary information like "vegetarian", "vegan", "gluten-free")

Menu text:
{extracted_text}

Please extract as many menu items as possible and return only valid JSON array format. Do not include any explanation or additional text.
"""


def build_college_schedule_prompt(extracted_text: str) -> str:
    return f"""
You are a helpful assistant that extracts college/university schedule information from text.

Parse the following schedule text and extract individual classes/courses with their details. Return the data as a JSON array where each item has:
- subject: string (the course/subject name)
- code: string (optional course code like "CS101", "MATH201")
- instructor: string (optional instructor/professor name)
- location: string (optional classroom/building location)
- dayOfWeek: string (one of: "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
- startTime: string (24-hour format like "09:00" or "14:30")
- endTime: string (24-hour format like "10:30" or "16:00")
- duration: number (optional duration in minutes)
- semester: string (optional semester like "Fall 2024", "Spring 2025")
- credits: number (optional credit hours)

Schedule text:
{extracted_text}

Please extract as many classes as possible and return only valid JSON array format. Do not include any explanation or additional text.
"""


def build_dining_schedule_prompt(extracted_text: str) -> str:
    return f"""
You are a helpful assistant that extracts dining schedule information from text.

Parse the following dining schedule text and extract meal timings with their details. Return the data as a JSON array where each item has:
- mealType: string (like "breakfast", "lunch", "dinner", "brunch", "snack")
- location: string (dining hall or cafeteria name)
- dayOfWeek: string (one of: "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday", or "Daily")
- startTime: string (24-hour format like "07:00" or "18:30")
- endTime: string (24-hour format like "09:30" or "21:00")
- specialNotes: string (optional notes like "Weekend Special", "Limited Menu")

Dining schedule text:
{extracted_text}

Please extract as many meal timings as possible and return only valid JSON array format. Do not include any explanation or additional text.
"""
