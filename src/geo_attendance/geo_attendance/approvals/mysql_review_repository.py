from __future__ import annotations

import json
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import ApprovalStatus, ReviewPriority, SubmissionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, json_column
from ..validation.scoring import ValidationFlags
from .model import ReviewItem
from .repository import ReviewQueueRepository

_COLUMNS = """
    review_id, attendance_id, user_id, submission_type, validation_flags, score,
    priority, status, reason, decided_by, decided_at, created_at
"""


def _to_item(r: dict) -> ReviewItem:
    return ReviewItem(
        review_id=int(r["review_id"]),
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        submission_type=SubmissionType(r["submission_type"]),
        flags=ValidationFlags.from_dict(json_column(r["validation_flags"]) or {}),
        score=int(r["score"]),
        priority=ReviewPriority(int(r["priority"])),
        status=ApprovalStatus(r["status"]),
        created_at=r["created_at"],
        reason=r.get("reason"),
        decided_by=int(r["decided_by"]) if r.get("decided_by") is not None else None,
        decided_at=r.get("decided_at"),
    )


class MySQLReviewQueueRepository(ReviewQueueRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        attendance_id: int,
        user_id: int,
        submission_type: SubmissionType,
        flags: ValidationFlags,
        score: int,
        priority: ReviewPriority,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_review_queue(
                    attendance_id, user_id, submission_type, validation_flags, score, priority, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(attendance_id),
                    int(user_id),
                    submission_type.value,
                    json.dumps(flags.as_dict()),
                    int(score),
                    priority.value,
                    ApprovalStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get(self, review_id: int) -> Optional[ReviewItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_review_queue WHERE review_id=%s", (int(review_id),))
            r = fetchone(cur)
            return _to_item(r) if r else None

    def list_items(
        self,
        *,
        status: Optional[ApprovalStatus] = None,
        priority: Optional[ReviewPriority] = None,
        user_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[ReviewItem]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if priority is not None:
            clauses.append("priority=%s")
            params.append(priority.value)
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        params.append(int(limit))
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_review_queue
                WHERE {where}
                ORDER BY priority DESC, created_at ASC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_item(r) for r in fetchall(cur)]

    def list_for_attendance(self, attendance_id: int) -> Sequence[ReviewItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_review_queue WHERE attendance_id=%s ORDER BY created_at ASC",
                (int(attendance_id),),
            )
            return [_to_item(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        review_id: int,
        status: ApprovalStatus,
        decided_by: int,
        decided_at: datetime,
        reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_review_queue
                SET status=%s, decided_by=%s, decided_at=%s, reason=%s
                WHERE review_id=%s AND status=%s
                """,
                (status.value, int(decided_by), decided_at, reason, int(review_id), ApprovalStatus.PENDING.value),
            )
            return cur.rowcount > 0
