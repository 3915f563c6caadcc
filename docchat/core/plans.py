"""
Subscription plans and per-upload quotas.

Dependencies: docchat.configs.plans
System role: Upload policy limits applied during ingestion
"""

import enum
from dataclasses import dataclass

from docchat.configs.plans import PlanSettings

BYTES_PER_MB = 1024 * 1024


class SubscriptionPlan(str, enum.Enum):
    """Billing tier of the uploading user."""

    FREE = "free"
    PRO = "pro"


@dataclass(frozen=True)
class PageQuota:
    """Limits that apply to one upload."""

    plan: SubscriptionPlan
    max_pages: int
    max_file_size_bytes: int

    @classmethod
    def for_plan(cls, plan: SubscriptionPlan, settings: PlanSettings) -> "PageQuota":
        """
        Resolve the limits of a plan tier.

        Args:
            plan: Subscription tier of the uploader
            settings: Configured plan limits

        Returns:
            PageQuota: Limits for that tier
        """
        if plan is SubscriptionPlan.PRO:
            return cls(
                plan=plan,
                max_pages=settings.pro_pages_per_pdf,
                max_file_size_bytes=settings.pro_max_file_size_mb * BYTES_PER_MB,
            )
        return cls(
            plan=plan,
            max_pages=settings.free_pages_per_pdf,
            max_file_size_bytes=settings.free_max_file_size_mb * BYTES_PER_MB,
        )

    def exceeds_pages(self, page_count: int) -> bool:
        return page_count > self.max_pages

    def exceeds_file_size(self, size_bytes: int) -> bool:
        return size_bytes > self.max_file_size_bytes
