"""Expense service for database operations."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from models.expense import Expense, STATUS_CONFIRMED, STATUS_PENDING, STATUS_REJECTED

_EXPENSE_FIELDS = """id, user_id, description, amount, category_id, suggested_category_id,
       category_confidence, inference_method, status, created_at, confirmed_at,
       rejected_at, rejection_reason"""


def _timestamp(moment: Optional[datetime]) -> Optional[str]:
    if moment is None:
        return None
    return moment.astimezone(timezone.utc).isoformat(timespec="seconds")


def _parse(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _row_to_expense(row) -> Expense:
    return Expense(
        id=row[0],
        user_id=row[1],
        description=row[2],
        amount=row[3],
        category_id=row[4],
        suggested_category_id=row[5],
        category_confidence=row[6],
        inference_method=row[7],
        status=row[8],
        created_at=_parse(row[9]),
        confirmed_at=_parse(row[10]),
        rejected_at=_parse(row[11]),
        rejection_reason=row[12],
    )


class ExpenseService:
    """Service for managing recorded expenses."""

    def __init__(self, db_manager):
        """Initialize the expense service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(self, expense: Expense) -> Expense:
        """Insert an expense.

        Args:
            expense: Expense to insert. created_at defaults to now.

        Returns:
            The same Expense with id and created_at populated.
        """
        if expense.created_at is None:
            expense.created_at = datetime.now(timezone.utc)

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO expenses (user_id, description, amount, category_id,
                    suggested_category_id, category_confidence, inference_method,
                    status, created_at, confirmed_at, rejected_at, rejection_reason)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    expense.user_id,
                    expense.description,
                    expense.amount,
                    expense.category_id,
                    expense.suggested_category_id,
                    expense.category_confidence,
                    expense.inference_method,
                    expense.status,
                    _timestamp(expense.created_at),
                    _timestamp(expense.confirmed_at),
                    _timestamp(expense.rejected_at),
                    expense.rejection_reason,
                ),
            )
            conn.commit()
            expense.id = cursor.lastrowid

        return expense

    def find(self, expense_id: int, user_id: Optional[int] = None) -> Optional[Expense]:
        """Get an expense by ID, optionally scoped to its owner.

        Returns:
            Expense if found (and owned by user_id when given), None otherwise.
        """
        query = f"SELECT {_EXPENSE_FIELDS} FROM expenses WHERE id = ?"
        params = [expense_id]
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)

        with self.db_manager.connect() as conn:
            row = conn.execute(query, params).fetchone()
            return _row_to_expense(row) if row else None

    def find_recent(self, user_id: int, limit: int = 20) -> List[Expense]:
        """Get a user's most recent expenses, newest first."""
        with self.db_manager.connect() as conn:
            rows = conn.execute(
                f"""
                SELECT {_EXPENSE_FIELDS} FROM expenses
                WHERE user_id = ?
                ORDER BY created_at DESC, id DESC
                LIMIT ?
                """,
                (user_id, limit),
            ).fetchall()
            return [_row_to_expense(row) for row in rows]

    def mark_confirmed(
        self,
        expense_id: int,
        user_id: int,
        category_id: Optional[int] = None,
        confidence: Optional[float] = None,
        allowed_statuses=(STATUS_PENDING,),
    ) -> bool:
        """Move an expense to 'confirmed', optionally changing its category.

        Args:
            expense_id: Expense to confirm.
            user_id: Owner; expenses of other users are never touched.
            category_id: New category, or None to keep the current one.
            confidence: New category confidence, or None to keep it.
            allowed_statuses: Statuses the expense may be in beforehand.

        Returns:
            True if the expense was updated, False if not found or not in an
            allowed status.
        """
        placeholders = ", ".join("?" * len(allowed_statuses))
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                UPDATE expenses
                SET status = ?,
                    confirmed_at = ?,
                    category_id = COALESCE(?, category_id),
                    category_confidence = COALESCE(?, category_confidence)
                WHERE id = ? AND user_id = ? AND status IN ({placeholders})
                """,
                (
                    STATUS_CONFIRMED,
                    _timestamp(datetime.now(timezone.utc)),
                    category_id,
                    confidence,
                    expense_id,
                    user_id,
                    *allowed_statuses,
                ),
            )
            conn.commit()
            return cursor.rowcount > 0

    def mark_rejected(
        self, expense_id: int, user_id: int, reason: Optional[str] = None
    ) -> bool:
        """Move a pending expense to 'rejected'.

        Returns:
            True if the expense was updated, False if not found or not pending.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                UPDATE expenses
                SET status = ?, rejected_at = ?, rejection_reason = ?
                WHERE id = ? AND user_id = ? AND status = ?
                """,
                (
                    STATUS_REJECTED,
                    _timestamp(datetime.now(timezone.utc)),
                    reason,
                    expense_id,
                    user_id,
                    STATUS_PENDING,
                ),
            )
            conn.commit()
            return cursor.rowcount > 0

    def frequent_category_ids(
        self, user_id: int, days: int = 30, limit: int = 3
    ) -> List[int]:
        """Get the categories a user confirmed most often recently.

        Args:
            user_id: User to look at.
            days: Trailing window, counted back from now.
            limit: Maximum number of categories.

        Returns:
            Category IDs ordered by confirmed-expense count, most used first.
        """
        since = _timestamp(datetime.now(timezone.utc) - timedelta(days=days))
        with self.db_manager.connect() as conn:
            rows = conn.execute(
                """
                SELECT category_id, COUNT(*) AS usage_count
                FROM expenses
                WHERE user_id = ? AND status = ? AND category_id IS NOT NULL
                  AND created_at >= ?
                GROUP BY category_id
                ORDER BY usage_count DESC, MAX(created_at) DESC
                LIMIT ?
                """,
                (user_id, STATUS_CONFIRMED, since, limit),
            ).fetchall()
            return [row[0] for row in rows]
