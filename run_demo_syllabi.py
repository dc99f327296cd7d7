#!/usr/bin/env python3
"""
run_demo_syllabi.py

Uploads every syllabus in a folder (demo_syllabi/*.pdf|*.md|*.png|...) to a
running UniFLO backend and records what came back:

1) POST /api/upload              (multipart: syllabus file + startDate + mode)
2) GET  /api/courses/{courseId}  (stored course as read back from the DB)

Outputs:
- demo_results.json (full responses per syllabus)
- demo_results.csv  (one summary row per syllabus)
"""

from __future__ import annotations

import argparse
import csv
import json
import mimetypes
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

SYLLABUS_SUFFIXES = {".pdf", ".md", ".markdown", ".txt", ".png", ".jpg", ".jpeg", ".tif", ".tiff"}

SUMMARY_FIELDS = [
    "file",
    "document_id",
    "course_id",
    "course",
    "start_date",
    "instructor",
    "events",
    "dated_events",
    "textbooks",
    "grading_categories",
    "grading_total",
    "important_dates",
]


def die(msg: str) -> None:
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


def save_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)


def save_csv(path: Path, rows: List[Dict[str, Any]], fieldnames: List[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for r in rows:
            w.writerow(r)


def find_syllabi(folder: Path) -> List[Path]:
    return sorted(p for p in folder.iterdir() if p.is_file() and p.suffix.lower() in SYLLABUS_SUFFIXES)


def post_upload(
    base_url: str,
    path: Path,
    start_date: Optional[str],
    mode: str,
    timeout_s: int,
) -> Dict[str, Any]:
    url = f"{base_url}/api/upload"
    content_type = mimetypes.guess_type(path.name)[0] or "text/markdown"

    data = {"mode": mode}
    if start_date:
        data["startDate"] = start_date
    files = [("syllabus", (path.name, path.read_bytes(), content_type))]

    r = requests.post(url, data=data, files=files, timeout=timeout_s)
    if r.status_code != 200:
        die(f"POST /api/upload failed for {path.name} ({r.status_code}): {r.text}")
    return r.json()


def get_course(base_url: str, course_id: int, timeout_s: int) -> Dict[str, Any]:
    url = f"{base_url}/api/courses/{course_id}"
    r = requests.get(url, timeout=timeout_s)
    if r.status_code != 200:
        die(f"GET /api/courses/{course_id} failed ({r.status_code}): {r.text}")
    return r.json()


def summarize_upload(file_name: str, upload_resp: Dict[str, Any]) -> Dict[str, Any]:
    data = upload_resp.get("data") or {}
    course = data.get("course") or {}
    events = data.get("events") or []
    grading = course.get("gradingWeights") or []
    instructor = course.get("instructor") or {}

    return {
        "file": file_name,
        "document_id": upload_resp.get("documentId"),
        "course_id": upload_resp.get("courseId"),
        "course": course.get("name"),
        "start_date": course.get("startDate"),
        "instructor": instructor.get("name"),
        "events": len(events),
        "dated_events": sum(1 for e in events if e.get("dueDate")),
        "textbooks": len(course.get("textbooks") or []),
        "grading_categories": len(grading),
        "grading_total": sum(int(g.get("weightPercent") or 0) for g in grading),
        "important_dates": len(data.get("importantDates") or []),
    }


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--base-url", default="http://127.0.0.1:8000", help="FastAPI base URL")
    ap.add_argument("--syllabi-dir", default="demo_syllabi", help="Folder containing syllabus files")
    ap.add_argument("--start-date", default=None, help="Course start date sent with every upload")
    ap.add_argument("--mode", choices=("regex", "llm"), default="regex")
    ap.add_argument("--timeout", type=int, default=60, help="HTTP timeout seconds")
    ap.add_argument("--sleep", type=float, default=0.0, help="Seconds to sleep between uploads")
    ap.add_argument("--out-json", default="demo_results/demo_results.json")
    ap.add_argument("--out-csv", default="demo_results/demo_results.csv")
    args = ap.parse_args(argv)

    base_url = args.base_url.rstrip("/")
    folder = Path(args.syllabi_dir)
    if not folder.exists():
        die(f"syllabi dir not found: {folder}")

    syllabi = find_syllabi(folder)
    if not syllabi:
        die(f"No syllabi found in {folder}")

    all_results: List[Dict[str, Any]] = []
    summary_rows: List[Dict[str, Any]] = []

    for p in syllabi:
        print(f"\n=== Uploading {p.name} ===")
        upload_resp = post_upload(base_url, p, args.start_date, args.mode, args.timeout)
        course_id = upload_resp.get("courseId")
        print(f"documentId = {upload_resp.get('documentId')} courseId = {course_id}")

        stored = get_course(base_url, course_id, args.timeout)
        all_results.append({"file": p.name, "uploadResponse": upload_resp, "storedCourse": stored})
        summary_rows.append(summarize_upload(p.name, upload_resp))

        if args.sleep > 0:
            time.sleep(args.sleep)

    save_json(Path(args.out_json), all_results)
    save_csv(Path(args.out_csv), summary_rows, SUMMARY_FIELDS)
    print(f"\nWrote {len(summary_rows)} results to {args.out_json} and {args.out_csv}")


if __name__ == "__main__":
    main()
