"""
HTTP tests for the syllabus API.

Each test gets its own sqlite file, upload dir and log dir; the model client
wraps a mocked OpenAI client.
"""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient

from syllabus_samples import MODEL_PAYLOAD, SAMPLE_SYLLABUS, START_DATE, fake_openai_client

from uniflo.config import ModelConfig, Settings
from uniflo.extraction import document_text
from uniflo.extraction.llm_parser import SyllabusModelClient
from uniflo.main import create_app


class ApiTestCase(unittest.TestCase):
    model_content = MODEL_PAYLOAD

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        self.settings = Settings(
            database_url=f"sqlite:///{root / 'uniflo.db'}",
            upload_dir=str(root / "uploads"),
            log_dir=str(root / "logs"),
            prefer_ocr=False,
        )
        self.fake = fake_openai_client(self.model_content)
        self.app = create_app(
            self.settings,
            model_client=SyllabusModelClient(ModelConfig(api_key="test"), client=self.fake),
        )
        self.client = TestClient(self.app)

    def tearDown(self) -> None:
        self.client.close()
        self.app.state.engine.dispose()
        self._tmp.cleanup()

    def upload(self, text=SAMPLE_SYLLABUS, filename="syllabus.md", content_type="text/markdown", **form):
        return self.client.post(
            "/api/upload",
            files={"syllabus": (filename, text.encode("utf-8"), content_type)},
            data=form,
        )


class TestUpload(ApiTestCase):
    def test_health(self) -> None:
        r = self.client.get("/health/db")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"ok": True})

    def test_upload_parses_and_stores(self) -> None:
        r = self.upload(startDate=START_DATE)
        self.assertEqual(r.status_code, 200, r.text)

        body = r.json()
        self.assertEqual(body["message"], "File uploaded and parsed successfully.")
        self.assertEqual(body["data"]["source"], "regex")
        self.assertEqual(body["data"]["course"]["startDate"], START_DATE)
        self.assertEqual(
            [(e["type"], e["dueDate"]) for e in body["data"]["events"]],
            [("Assignment", "2024-01-15"), ("Exam", "2024-03-04"), ("Project", "2024-04-29")],
        )

        uploaded = list(Path(self.settings.upload_dir).iterdir())
        self.assertEqual(len(uploaded), 1)
        self.assertTrue(uploaded[0].name.endswith("_syllabus.md"))
        self.assertTrue(list(Path(self.settings.log_dir).glob("run_*.log")))

    def test_stored_course_reads_back_in_order(self) -> None:
        course_id = self.upload(startDate=START_DATE).json()["courseId"]

        r = self.client.get(f"/api/courses/{course_id}")
        self.assertEqual(r.status_code, 200)
        detail = r.json()

        self.assertEqual(detail["course"]["name"], "CS 101 - Introduction to Programming")
        self.assertEqual(detail["course"]["academicTerm"], "Spring 2024")
        self.assertEqual(detail["instructor"]["officeHours"], "Tue/Thu 1-2pm")
        self.assertEqual(detail["textbooks"][0]["kind"], "Required")
        self.assertEqual([g["category"] for g in detail["gradingWeights"]], ["Homework", "Exams", "Participation"])
        self.assertEqual([e["title"] for e in detail["events"]][0], "Homework 1 due Week 2")
        self.assertEqual(detail["events"][0]["weekReference"], "Week 2")
        self.assertEqual(detail["importantDates"], ["March 4, 2024", "04/29/2024"])

    def test_no_file(self) -> None:
        r = self.client.post("/api/upload", data={"mode": "regex"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["detail"], "No file uploaded.")

    def test_bad_mode(self) -> None:
        r = self.upload(mode="magic")
        self.assertEqual(r.status_code, 422)

    def test_malformed_start_date_is_ignored(self) -> None:
        r = self.upload(startDate="next monday")
        self.assertEqual(r.status_code, 200, r.text)

        data = r.json()["data"]
        self.assertIsNone(data["course"]["startDate"])
        self.assertIsNone(data["events"][0]["dueDate"])
        self.assertEqual(data["events"][0]["weekReference"], "Week 2")

    def test_overlong_week_number_still_uploads(self) -> None:
        r = self.upload(text="Homework due Week " + "9" * 5000 + "\n", startDate=START_DATE)
        self.assertEqual(r.status_code, 200, r.text[:200])
        self.assertIsNone(r.json()["data"]["events"][0]["dueDate"])

    def test_llm_mode(self) -> None:
        r = self.upload(startDate=START_DATE, mode="llm")
        self.assertEqual(r.status_code, 200, r.text)

        data = r.json()["data"]
        self.assertEqual(data["source"], "llm")
        self.assertEqual(data["events"][0]["dueDate"], "2024-01-15")
        self.fake.chat.completions.create.assert_called_once()

    def test_unreadable_image_is_500(self) -> None:
        with patch.object(document_text.subprocess, "run", side_effect=FileNotFoundError()):
            r = self.upload(text="not really a png", filename="scan.png", content_type="image/png")
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json()["detail"], "Failed to parse syllabus.")


class TestBadModelResponse(ApiTestCase):
    model_content = "this is not json"

    def test_llm_upload_fails_cleanly(self) -> None:
        r = self.upload(mode="llm")
        self.assertEqual(r.status_code, 500)
        self.assertEqual(self.client.get("/api/courses").json(), [])

    def test_reparse_failure_hides_error_text(self) -> None:
        doc_id = self.upload().json()["documentId"]

        r = self.client.post("/api/parse-syllabus", json={"documentId": doc_id})
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json()["detail"], "Failed to parse syllabus.")


class TestParseStoredSyllabus(ApiTestCase):
    def test_reparse_with_model(self) -> None:
        doc_id = self.upload().json()["documentId"]

        r = self.client.post("/api/parse-syllabus", json={"documentId": doc_id, "startDate": START_DATE})
        self.assertEqual(r.status_code, 200, r.text)

        body = r.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["course"], "CS 101 - Introduction to Programming")
        self.assertEqual(body["startDate"], START_DATE)
        self.assertEqual(body["events"][0]["type"], "Assignment")
        self.assertEqual(body["events"][0]["dueDate"], "2024-01-15")

        # one course from the upload, one from the re-parse
        self.assertEqual(len(self.client.get("/api/courses").json()), 2)

    def test_unknown_document(self) -> None:
        r = self.client.post("/api/parse-syllabus", json={"documentId": 999})
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["detail"], "Document not found")


class TestCourses(ApiTestCase):
    def test_list_is_newest_first(self) -> None:
        first = self.upload().json()["courseId"]
        second = self.upload(text="# Data Structures\nQuiz 1 on 02/05/2024\n").json()["courseId"]

        courses = self.client.get("/api/courses").json()
        self.assertEqual([c["courseId"] for c in courses], [second, first])
        self.assertEqual(courses[0]["name"], "Data Structures")
        self.assertEqual(courses[0]["source"], "regex")

    def test_unknown_course(self) -> None:
        r = self.client.get("/api/courses/12345")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["detail"], "Course not found")

    def test_course_without_instructor(self) -> None:
        course_id = self.upload(text="# Data Structures\nQuiz 1 on 02/05/2024\n").json()["courseId"]
        detail = self.client.get(f"/api/courses/{course_id}").json()
        self.assertIsNone(detail["instructor"])
        self.assertEqual(detail["events"][0]["type"], "Quiz")


if __name__ == "__main__":
    unittest.main()
