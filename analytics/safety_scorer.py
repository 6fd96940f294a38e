"""
Driver Safety Scorer.

Computes a 0-100 safety score for one driver from:
- Trip completion ratio (up to 60 points)
- License validity (25 points)
- A fixed base (15 points)
- A 25 point penalty while suspended
"""

from datetime import datetime
from typing import Optional

from api.analytics_models import (
    DriverSnapshot,
    DriverStatus,
    LicenseStatus,
    SafetyScoreBreakdown,
)
from core.exceptions import DriverNotFoundError
from core.runtime import DriverStore
from core.structured_logging import entity_context, get_logger
from .base import BaseComponent
from .policy import (
    LICENSE_EXPIRY_WARNING_DAYS,
    NEW_DRIVER_COMPLETION_RATE,
    SAFETY_BASE_POINTS,
    SAFETY_COMPLETION_WEIGHT,
    SAFETY_LICENSE_WEIGHT,
    SAFETY_SCORE_MAX,
    SAFETY_SCORE_MIN,
    SAFETY_SUSPENSION_PENALTY,
)

logger = get_logger(__name__)


class SafetyScorer(BaseComponent):
    """Scores a single driver snapshot."""

    def compute(
        self, driver: DriverSnapshot, now: Optional[datetime] = None
    ) -> SafetyScoreBreakdown:
        now = self.resolve_now(now)

        completion_rate = self.safe_div(
            driver.completed_trips,
            driver.total_trips,
            default=NEW_DRIVER_COMPLETION_RATE,
        )
        license_expiry = self.ensure_utc(driver.license_expiry)
        license_valid = license_expiry > now
        is_suspended = driver.status == DriverStatus.SUSPENDED

        completion_points = completion_rate * SAFETY_COMPLETION_WEIGHT
        license_points = SAFETY_LICENSE_WEIGHT if license_valid else 0
        suspension_penalty = -SAFETY_SUSPENSION_PENALTY if is_suspended else 0

        raw = SAFETY_BASE_POINTS + completion_points + license_points + suspension_penalty
        final_score = self.round_to(max(SAFETY_SCORE_MIN, min(SAFETY_SCORE_MAX, raw)), 1)

        days_remaining = int(self.days_between(license_expiry, now))

        return SafetyScoreBreakdown(
            driver_id=driver.id,
            completion_rate=completion_rate,
            license_valid=license_valid,
            is_suspended=is_suspended,
            base_points=SAFETY_BASE_POINTS,
            completion_points=self.round_to(completion_points, 2),
            license_points=license_points,
            suspension_penalty=suspension_penalty,
            final_score=final_score,
            license_status=self.license_status(days_remaining),
            license_days_remaining=days_remaining,
        )

    @staticmethod
    def license_status(days_remaining: int) -> LicenseStatus:
        """
        Badge status from whole days left. A license that lapsed earlier today
        still has 0 days and reads EXPIRING_SOON, though it no longer scores.
        """
        if days_remaining < 0:
            return LicenseStatus.EXPIRED
        if days_remaining <= LICENSE_EXPIRY_WARNING_DAYS:
            return LicenseStatus.EXPIRING_SOON
        return LicenseStatus.VALID


def update_driver_safety_score(
    driver_id: str,
    store: DriverStore,
    now: Optional[datetime] = None,
) -> float:
    """
    Recompute a driver's score and write it back to the store.

    Raises:
        DriverNotFoundError: if ``driver_id`` is not in the store.
    """
    with entity_context(driver_id=driver_id):
        driver = store.get_driver(driver_id)
        if driver is None:
            logger.warning("Safety score update for unknown driver")
            raise DriverNotFoundError(driver_id)

        breakdown = SafetyScorer().compute(driver, now=now)
        store.save_safety_score(driver_id, breakdown.final_score)

        logger.info("Safety score persisted", context={
            "previous_score": driver.safety_score,
            "final_score": breakdown.final_score,
        })
        return breakdown.final_score
