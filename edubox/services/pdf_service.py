"""
Campus-life PDF parsing: text extraction (pypdf) and model-output post-processing for dining
menus and class/dining schedules. When the model output is not a JSON array, a per-line regex
heuristic recovers what it can.
"""
import io
import logging
import re
from typing import Any

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from edubox.services.json_extract import parse_json_array

logger = logging.getLogger(__name__)

MAX_ITEMS = 20
EXTRACTED_TEXT_PREVIEW = 500

_PRICE = re.compile(r"\$?(\d+\.?\d*)")
_NON_WORD = re.compile(r"[^\w\s]")
_TIME = re.compile(r"(\d{1,2}):(\d{2})")
_WEEKDAY = re.compile(r"(Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday)", re.IGNORECASE)
_WEEKDAY_OR_DAILY = re.compile(r"(Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday|Daily)", re.IGNORECASE)
_MEAL = re.compile(r"(breakfast|lunch|dinner|brunch|snack)", re.IGNORECASE)


class PdfExtractionError(Exception):
    """The PDF could not be read (encrypted, corrupted, not a PDF)."""


def extract_pdf_text(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted:
            raise PdfExtractionError("PDF is encrypted")
        return "\n".join((page.extract_text() or "") for page in reader.pages)
    except PdfExtractionError:
        raise
    except (PdfReadError, ValueError, OSError) as e:
        raise PdfExtractionError(str(e)) from e


def _non_empty_lines(text: str) -> list[str]:
    return [line for line in text.split("\n") if line.strip()]


# ---- Dining menu ----

def _menu_item_from_line(line: str) -> dict[str, Any] | None:
    price_match = _PRICE.search(line)
    name = _NON_WORD.sub("", _PRICE.sub("", line, count=1)).strip()
    if len(name) <= 3:
        return None
    item: dict[str, Any] = {"name": name, "description": "", "category": "general"}
    if price_match:
        item["price"] = float(price_match.group(1))
    return item


def parse_menu_items(model_text: str) -> list[dict[str, Any]]:
    """JSON array of items with a non-blank name; per-line price/name heuristic on parse failure."""
    try:
        items = parse_json_array(model_text)
        items = [
            item for item in items
            if isinstance(item, dict) and isinstance(item.get("name"), str) and item["name"].strip()
        ]
    except ValueError as e:
        logger.warning("Failed to parse menu response as JSON, using line heuristic: %s", e)
        items = [i for i in (_menu_item_from_line(line) for line in _non_empty_lines(model_text)) if i]
    return items[:MAX_ITEMS]


# ---- Class / dining schedules ----

def _has_fields(item: Any, *names: str) -> bool:
    return isinstance(item, dict) and all(item.get(n) for n in names)


def _start_time(match: re.Match) -> str:
    return f"{match.group(1).zfill(2)}:{match.group(2)}"


def _college_item_from_line(line: str) -> dict[str, Any] | None:
    time_match = _TIME.search(line)
    day_match = _WEEKDAY.search(line)
    if not (time_match and day_match):
        return None
    subject = _WEEKDAY.sub("", re.sub(r"\d{1,2}:\d{2}", "", line, count=1), count=1).strip()
    return {
        "subject": subject,
        "dayOfWeek": day_match.group(0),
        "startTime": _start_time(time_match),
        "endTime": "",
        "location": "",
        "instructor": "",
    }


def _dining_item_from_line(line: str) -> dict[str, Any] | None:
    time_match = _TIME.search(line)
    meal_match = _MEAL.search(line)
    if not (time_match and meal_match):
        return None
    day_match = _WEEKDAY_OR_DAILY.search(line)
    return {
        "mealType": meal_match.group(0).lower(),
        "dayOfWeek": day_match.group(0) if day_match else "Daily",
        "startTime": _start_time(time_match),
        "endTime": "",
        "location": "",
    }


def parse_schedule_items(model_text: str, schedule_type: str | None) -> list[dict[str, Any]]:
    college = schedule_type == "college"
    try:
        items = parse_json_array(model_text)
        if college:
            items = [i for i in items if _has_fields(i, "subject", "dayOfWeek", "startTime")]
        else:
            items = [i for i in items if _has_fields(i, "mealType", "dayOfWeek", "startTime")]
    except ValueError as e:
        logger.warning("Failed to parse schedule response as JSON, using line heuristic: %s", e)
        from_line = _college_item_from_line if college else _dining_item_from_line
        items = [i for i in (from_line(line) for line in _non_empty_lines(model_text)) if i]
    return items[:MAX_ITEMS]
