"""Expense confirmation flow: the user's answer feeds the learning store."""

from typing import Optional
from models.expense import STATUS_CONFIRMED, STATUS_PENDING
from logger import get_logger

logger = get_logger()


class ExpenseConfirmationService:
    """Applies a user's confirmation, rejection or correction to an expense.

    Args:
        expenses: ExpenseService instance.
        learning: LearningService instance.
    """

    def __init__(self, expenses, learning):
        self.expenses = expenses
        self.learning = learning

    def confirm_expense(self, user_id: int, expense_id: int) -> bool:
        """Confirm a pending expense as categorized.

        Returns:
            True if confirmed, False if the user has no such pending expense.
        """
        expense = self.expenses.find(expense_id, user_id=user_id)
        if expense is None or expense.status != STATUS_PENDING:
            logger.warning(
                f"Expense {expense_id} not found for confirmation (user {user_id})"
            )
            return False

        if not self.expenses.mark_confirmed(expense_id, user_id):
            return False

        if expense.category_id and expense.description:
            self.learning.learn_from_choice(
                user_id, expense.description, expense.category_id
            )

        logger.info(
            f"Expense {expense_id} confirmed by user {user_id} "
            f"(category {expense.category_id})"
        )
        return True

    def reject_expense(
        self, user_id: int, expense_id: int, reason: Optional[str] = None
    ) -> bool:
        """Reject a pending expense.

        Returns:
            True if rejected, False if the user has no such pending expense.
        """
        if not self.expenses.mark_rejected(expense_id, user_id, reason):
            return False

        logger.info(f"Expense {expense_id} rejected by user {user_id}: {reason}")
        return True

    def update_category(self, user_id: int, expense_id: int, category_id: int) -> bool:
        """Set the category the user picked and learn from it.

        The expense becomes confirmed with confidence 1.0.

        Returns:
            True if updated, False if the user has no pending or confirmed
            expense with that ID.
        """
        expense = self.expenses.find(expense_id, user_id=user_id)
        if expense is None:
            return False

        updated = self.expenses.mark_confirmed(
            expense_id,
            user_id,
            category_id=category_id,
            confidence=1.0,
            allowed_statuses=(STATUS_PENDING, STATUS_CONFIRMED),
        )
        if not updated:
            return False

        if expense.description:
            self.learning.learn_from_choice(user_id, expense.description, category_id)

        logger.info(
            f"Expense {expense_id} category changed by user {user_id}: "
            f"{expense.suggested_category_id} -> {category_id}"
        )
        return True
