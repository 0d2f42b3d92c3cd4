#!/usr/bin/env python3
"""
Register a new student directly in the database configured by DATABASE_URL.

Usage (from the repository root, installed or not):
  python scripts/add_student.py --first-name Peter --last-name Hang --program ICT
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make students_api importable when run from a plain checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from students_api.db.create_tables import create_all  # noqa: E402
from students_api.domain.students import InvalidStudentError, parse_student_fields  # noqa: E402
from students_api.repositories.sql_repository import StudentRepository  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Register a student in the database")
    ap.add_argument("--first-name", required=True, help="First name")
    ap.add_argument("--last-name", required=True, help="Last name")
    ap.add_argument("--program", required=True, help="Study program (e.g. ICT)")
    return ap


def main(argv: list[str] | None = None) -> str:
    args = build_parser().parse_args(argv)
    try:
        fields = parse_student_fields(
            {"firstName": args.first_name, "lastName": args.last_name, "program": args.program}
        )
    except InvalidStudentError as exc:
        raise SystemExit(exc.message)

    create_all()
    entity = StudentRepository().create_student(fields)
    print("OK: student registered")
    print(f"  ID: {entity.id}")
    print(f"  Name: {entity.first_name} {entity.last_name}")
    print(f"  Program: {entity.program}")
    return entity.id


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
