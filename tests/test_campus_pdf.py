import pytest

from edubox.services.pdf_service import (
    PdfExtractionError,
    extract_pdf_text,
    parse_menu_items,
    parse_schedule_items,
)

PDF_FILE = {"pdf": ("menu.pdf", b"%PDF-1.4 stub", "application/pdf")}


class _FakeModel:
    def __init__(self, reply):
        self.reply = reply
        self.prompts = []

    def __call__(self, system_instruction, prompt, *, temperature=None, model=None, max_retries=0):
        self.prompts.append(prompt)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


def test_menu_requires_sign_in(client):
    response = client.post("/api/process-pdf-menu", files=PDF_FILE)
    assert response.status_code == 401


def test_menu_rejects_non_pdf(client, signed_in, monkeypatch):
    model = _FakeModel("[]")
    monkeypatch.setattr("edubox.routers.campus.generate_text", model)

    response = client.post("/api/process-pdf-menu", files={"pdf": ("menu.txt", b"hello", "text/plain")})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid PDF file"}
    assert model.prompts == []


def test_menu_missing_file_is_400(client, signed_in):
    response = client.post("/api/process-pdf-menu")
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid PDF file"}


def test_menu_without_text_never_calls_model(client, signed_in, monkeypatch):
    model = _FakeModel("[]")
    monkeypatch.setattr("edubox.routers.campus.generate_text", model)
    monkeypatch.setattr("edubox.routers.campus.extract_pdf_text", lambda data: "  \n ")

    response = client.post("/api/process-pdf-menu", files=PDF_FILE)

    assert response.status_code == 400
    assert response.json() == {"error": "No text could be extracted from the PDF"}
    assert model.prompts == []


def test_menu_unreadable_pdf_is_400(client, signed_in, monkeypatch):
    def broken(data):
        raise PdfExtractionError("EOF marker not found")

    monkeypatch.setattr("edubox.routers.campus.extract_pdf_text", broken)

    response = client.post("/api/process-pdf-menu", files=PDF_FILE)

    assert response.status_code == 400
    assert "encrypted or corrupted" in response.json()["error"]


def test_menu_items_are_extracted(client, signed_in, monkeypatch):
    text = "Lunch Menu\n" + "Pasta Primavera $12.50\n" * 60
    model = _FakeModel(
        '```json\n[{"name": "Pasta Primavera", "price": 12.5, "category": "main"}, {"price": 3}, {"name": "  "}]\n```'
    )
    monkeypatch.setattr("edubox.routers.campus.generate_text", model)
    monkeypatch.setattr("edubox.routers.campus.extract_pdf_text", lambda data: text)

    response = client.post("/api/process-pdf-menu", files=PDF_FILE)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["menuItems"] == [{"name": "Pasta Primavera", "price": 12.5, "category": "main"}]
    assert body["extractedText"] == text[:500]
    assert "Pasta Primavera $12.50" in model.prompts[0]


def test_menu_model_failure_is_500(client, signed_in, monkeypatch):
    monkeypatch.setattr("edubox.routers.campus.generate_text", _FakeModel(RuntimeError("quota")))
    monkeypatch.setattr("edubox.routers.campus.extract_pdf_text", lambda data: "Soup $4")

    response = client.post("/api/process-pdf-menu", files=PDF_FILE)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process PDF", "details": "quota"}


def test_college_schedule_extraction(client, signed_in, monkeypatch):
    model = _FakeModel(
        '[{"subject": "Calculus", "dayOfWeek": "Monday", "startTime": "09:00"},'
        ' {"subject": "Physics", "dayOfWeek": "Tuesday"}]'
    )
    monkeypatch.setattr("edubox.routers.campus.generate_text", model)
    monkeypatch.setattr("edubox.routers.campus.extract_pdf_text", lambda data: "MATH101 Calculus Mon 9:00")

    response = client.post("/api/process-pdf-schedule", files=PDF_FILE, data={"type": "college"})

    assert response.status_code == 200
    body = response.json()
    assert body["type"] == "college"
    assert body["scheduleItems"] == [{"subject": "Calculus", "dayOfWeek": "Monday", "startTime": "09:00"}]
    assert "college/university schedule" in model.prompts[0]


def test_dining_schedule_is_the_default(client, signed_in, monkeypatch):
    model = _FakeModel("[]")
    monkeypatch.setattr("edubox.routers.campus.generate_text", model)
    monkeypatch.setattr("edubox.routers.campus.extract_pdf_text", lambda data: "Breakfast 7:00")

    response = client.post("/api/process-pdf-schedule", files=PDF_FILE)

    assert response.status_code == 200
    assert response.json()["scheduleItems"] == []
    assert "dining schedule" in model.prompts[0]


def test_extract_pdf_text_rejects_empty_bytes():
    with pytest.raises(PdfExtractionError):
        extract_pdf_text(b"")


def test_menu_line_heuristic():
    items = parse_menu_items("Grilled Salmon $14.99\nTea $2")
    assert items == [{"name": "Grilled Salmon", "description": "", "category": "general", "price": 14.99}]


def test_menu_items_are_capped():
    reply = "[" + ",".join('{"name": "Dish %d"}' % i for i in range(30)) + "]"
    assert len(parse_menu_items(reply)) == 20


def test_college_line_heuristic():
    items = parse_schedule_items("Calculus Monday 9:00", "college")
    assert items == [{
        "subject": "Calculus",
        "dayOfWeek": "Monday",
        "startTime": "09:00",
        "endTime": "",
        "location": "",
        "instructor": "",
    }]


def test_dining_line_heuristic_defaults_to_daily():
    items = parse_schedule_items("Lunch 11:30 at Commons", "dining")
    assert items == [{
        "mealType": "lunch",
        "dayOfWeek": "Daily",
        "startTime": "11:30",
        "endTime": "",
        "location": "",
    }]
