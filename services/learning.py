"""Per-user learning store: keyword -> category associations.

Every time a user confirms or corrects the category of an expense, the
keywords of its description (and its merchant, when one can be spotted) are
reinforced for that category. Future descriptions are matched against these
weighted associations before any global heuristic runs.
"""

from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from config import InferenceSettings
from categorization.keywords import extract_keywords, extract_merchant
from models.learning import LearningEntry, LearningMatch, LearningStats, MERCHANT_PREFIX
from logger import get_logger

logger = get_logger()

# Atomic increment-or-insert against UNIQUE(user_id, keyword, category_id).
# Parameters: user_id, keyword, category_id, base weight, now, cap, step.
_UPSERT_SQL = """
    INSERT INTO category_learning
        (user_id, keyword, category_id, confidence_weight, usage_count, last_used_at)
    VALUES (?, ?, ?, ?, 1, ?)
    ON CONFLICT (user_id, keyword, category_id) DO UPDATE SET
        usage_count = usage_count + 1,
        confidence_weight = MIN(?, confidence_weight + ?),
        last_used_at = excluded.last_used_at
"""

# Substring match in either direction: "starbucks" finds "merchant:starbucks"
# and "starbucks today" finds "starbucks".
_LOOKUP_SQL = """
    SELECT category_id, confidence_weight
    FROM category_learning
    WHERE user_id = ?
      AND (instr(keyword, ?) > 0 OR instr(?, keyword) > 0)
    ORDER BY confidence_weight DESC, usage_count DESC
    LIMIT ?
"""


def _timestamp(moment: datetime) -> str:
    # Fixed format so timestamps compare correctly as text
    return moment.astimezone(timezone.utc).isoformat(timespec="seconds")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class LearningService:
    """Service for the per-user category learning store."""

    def __init__(self, db_manager, settings: Optional[InferenceSettings] = None):
        """Initialize the learning service.

        Args:
            db_manager: Database manager instance for database operations.
            settings: Inference tunables. Defaults to InferenceSettings().
        """
        self.db_manager = db_manager
        self.settings = settings or InferenceSettings()

    def find_best_match(self, user_id: int, description: str) -> Optional[LearningMatch]:
        """Find the category the user most likely means by a description.

        For each keyword of the description, the user's strongest matching
        associations are fetched and summed per category. A category's
        confidence blends keyword coverage (share of the description's
        keywords that point to it) with average association strength.

        Args:
            user_id: User whose history is searched.
            description: Raw expense description.

        Returns:
            LearningMatch for the most confident category, or None when the
            description has no keywords or nothing in the history matches.
        """
        keywords = extract_keywords(description)
        if not keywords:
            return None

        s = self.settings
        total_weight = defaultdict(float)
        matched = defaultdict(list)

        with self.db_manager.connect() as conn:
            for keyword in sorted(keywords):
                rows = conn.execute(
                    _LOOKUP_SQL, (user_id, keyword, keyword, s.lookup_limit)
                ).fetchall()
                for category_id, weight in rows:
                    total_weight[category_id] += weight
                    if keyword not in matched[category_id]:
                        matched[category_id].append(keyword)

        if not matched:
            return None

        best = None
        for category_id, category_keywords in matched.items():
            keyword_count = len(category_keywords)
            coverage = keyword_count / len(keywords)
            average_weight = total_weight[category_id] / keyword_count
            confidence = s.coverage_weight * coverage + s.strength_weight * (
                min(average_weight, s.strength_cap) / s.strength_cap
            )
            confidence = min(confidence, 1.0)

            if best is None or confidence > best.confidence:
                best = LearningMatch(
                    category_id=category_id,
                    confidence=confidence,
                    matched_keywords=category_keywords,
                )

        logger.debug(
            f"Learning match for user {user_id}: category {best.category_id} "
            f"({best.confidence:.2f}) via {best.matched_keywords}"
        )
        return best

    def learn_from_choice(
        self, user_id: int, description: str, category_id: int
    ) -> List[str]:
        """Reinforce the description's keywords (and merchant) for a category.

        Existing (user, keyword, category) associations are incremented in a
        single statement, so concurrent confirmations never duplicate a row
        or lose an increment.

        Args:
            user_id: User who confirmed or chose the category.
            description: Raw expense description.
            category_id: Category the user settled on.

        Returns:
            The keys that were reinforced, merchant key last.
        """
        s = self.settings
        now = _timestamp(_now())

        params = [
            (user_id, keyword, category_id, s.keyword_base_weight, now, s.max_weight, s.keyword_step)
            for keyword in sorted(extract_keywords(description))
        ]

        merchant = extract_merchant(description)
        if merchant:
            params.append(
                (
                    user_id,
                    f"{MERCHANT_PREFIX}{merchant.lower()}",
                    category_id,
                    s.merchant_base_weight,
                    now,
                    s.max_weight,
                    s.merchant_step,
                )
            )

        if not params:
            logger.debug(f"Nothing to learn from '{description}'")
            return []

        with self.db_manager.connect() as conn:
            conn.executemany(_UPSERT_SQL, params)
            conn.commit()

        learned = [p[1] for p in params]
        logger.info(
            f"User {user_id} reinforced {len(learned)} keyword(s) for category {category_id}"
        )
        return learned

    def decay(self, days_threshold: Optional[int] = None) -> int:
        """Weaken associations that haven't been used for a while.

        Entries last used before the threshold and still above the decay
        floor have their weight multiplied by the decay factor. Safe to run
        repeatedly.

        Args:
            days_threshold: Age in days; defaults to settings.decay_days.

        Returns:
            Number of entries decayed.
        """
        s = self.settings
        days = s.decay_days if days_threshold is None else days_threshold
        cutoff = _timestamp(_now() - timedelta(days=days))

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                UPDATE category_learning
                SET confidence_weight = confidence_weight * ?
                WHERE last_used_at < ? AND confidence_weight > ?
                """,
                (s.decay_factor, cutoff, s.decay_floor),
            )
            conn.commit()

        logger.info(f"Decayed {cursor.rowcount} learning entries older than {days} days")
        return cursor.rowcount

    def stats(self, user_id: int) -> LearningStats:
        """Summarize a user's learning history."""
        with self.db_manager.connect() as conn:
            row = conn.execute(
                """
                SELECT COUNT(DISTINCT keyword), COUNT(DISTINCT category_id),
                       SUM(usage_count), AVG(confidence_weight)
                FROM category_learning
                WHERE user_id = ?
                """,
                (user_id,),
            ).fetchone()

        return LearningStats(
            unique_keywords=row[0] or 0,
            categories_learned=row[1] or 0,
            total_usage=row[2] or 0,
            average_confidence=round(row[3] or 0.0, 2),
        )

    def find_entries(self, user_id: int) -> List[LearningEntry]:
        """Get all of a user's associations, strongest first."""
        with self.db_manager.connect() as conn:
            rows = conn.execute(
                """
                SELECT user_id, keyword, category_id, confidence_weight,
                       usage_count, last_used_at
                FROM category_learning
                WHERE user_id = ?
                ORDER BY confidence_weight DESC, usage_count DESC, keyword
                """,
                (user_id,),
            ).fetchall()

        return [
            LearningEntry(
                user_id=row[0],
                keyword=row[1],
                category_id=row[2],
                confidence_weight=row[3],
                usage_count=row[4],
                last_used_at=datetime.fromisoformat(row[5]),
            )
            for row in rows
        ]
