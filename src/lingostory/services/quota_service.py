"""Monthly story quota tracking."""
import logging
from datetime import UTC, datetime
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lingostory.config import settings
from lingostory.errors import QuotaExhaustedError
from lingostory.models.models import QuotaUsage
from lingostory.models.story_models import Quota
from lingostory.monitoring import quota_rejections

logger = logging.getLogger(__name__)


def period_key(moment: datetime) -> str:
    """Quota period of a moment, e.g. "2025-11"."""
    return f"{moment.year:04d}-{moment.month:02d}"


class QuotaTracker:
    """Computes and consumes the story generation allowance.

    Usage is counted per calendar month. The limit is derived from the
    premium status passed on each call, so an upgrade takes effect without
    resetting the month's usage.
    """

    def __init__(
        self,
        db: Session,
        user_id: Optional[int] = None,
        free_limit: Optional[int] = None,
        premium_limit: Optional[int] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self.db = db
        self.user_id = user_id
        self.free_limit = settings.quota.free_limit if free_limit is None else free_limit
        self.premium_limit = settings.quota.premium_limit if premium_limit is None else premium_limit
        self.clock = clock

    def limit_for(self, is_premium: bool) -> int:
        return self.premium_limit if is_premium else self.free_limit

    def current_period(self) -> str:
        return period_key(self.clock())

    def _usage(self, period: str) -> Optional[QuotaUsage]:
        return (
            self.db.query(QuotaUsage)
            .filter(QuotaUsage.user_id == self.user_id, QuotaUsage.period == period)
            .first()
        )

    def current(self, is_premium: bool) -> Quota:
        """Get the quota for the current period."""
        period = self.current_period()
        usage = self._usage(period)
        limit = self.limit_for(is_premium)
        used = usage.used_count if usage else 0
        return Quota(
            limit=limit,
            remaining=max(0, limit - used),
            is_premium=is_premium,
            period=period,
        )

    def consume(self, is_premium: bool) -> Quota:
        """Use one story from the current period's allowance."""
        quota = self.current(is_premium)
        if not quota.has_quota:
            quota_rejections.inc()
            raise QuotaExhaustedError(quota.remaining, quota.limit, is_premium)

        usage = self._usage(quota.period)
        try:
            if usage is None:
                usage = QuotaUsage(user_id=self.user_id, period=quota.period, used_count=0)
                self.db.add(usage)
            usage.used_count += 1
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to record quota usage for user %s", self.user_id)
            raise

        updated = self.current(is_premium)
        logger.info(
            "Quota consumed for user %s: %s remaining in %s",
            self.user_id,
            updated.display_text,
            updated.period,
        )
        return updated

    def next_reset_at(self) -> datetime:
        """First moment of the next quota period."""
        now = self.clock()
        if now.month == 12:
            return datetime(now.year + 1, 1, 1, tzinfo=UTC)
        return datetime(now.year, now.month + 1, 1, tzinfo=UTC)

    def days_until_reset(self) -> int:
        delta = self.next_reset_at() - self.clock()
        return max(0, delta.days)
