"""Tests for role recommendations."""

import pytest

from founder_bleed.core.roles import (
    MAX_ROLES,
    RoleEvent,
    RoleTask,
    recommend_roles,
    role_title,
)


@pytest.fixture
def tier_rates():
    return {"senior": 100000, "junior": 50000, "ea": 30000}


def role_event(title, tier="senior", area="Development", vertical="engineering", minutes=60):
    return RoleEvent(
        title=title,
        final_tier=tier,
        business_area=area,
        vertical=vertical,
        duration_minutes=minutes,
    )


class TestRoleTitle:
    def test_ea(self):
        assert role_title("ea", None, "Operations") == "Executive Assistant"

    def test_engineering_area(self):
        assert role_title("senior", "engineering", "Development") == "Senior Developer"
        assert role_title("junior", "engineering", "Data/Analytics") == "Junior Data Analyst"

    def test_business_area(self):
        assert role_title("senior", "business", "Finance") == "Finance Manager"

    def test_consolidated(self):
        assert role_title("senior", "business", "Consolidated") == "Senior Operations Manager"
        assert role_title("junior", "engineering", "Consolidated") == "Junior Technical Coordinator"

    def test_fallback_specialist(self):
        assert role_title("senior", "business", "Product") == "Senior Product Specialist"


class TestRecommendRoles:
    def test_cluster_over_threshold_becomes_role(self, tier_rates):
        events = [role_event("Build API", minutes=360), role_event("Build API", minutes=240)]
        roles = recommend_roles(events, 7, tier_rates)

        assert len(roles) == 1
        role = roles[0]
        assert role.role_title == "Senior Developer"
        assert role.role_tier == "senior"
        assert role.vertical == "engineering"
        assert role.hours_per_week == 10
        assert role.cost_annual == 25000
        assert role.cost_weekly == 481
        assert role.cost_monthly == 2082
        assert role.tasks == [RoleTask(task="Build API", hours_per_week=10.0)]

    def test_small_clusters_are_consolidated(self, tier_rates):
        events = [
            role_event("Budget review", area="Finance", vertical="business", minutes=300),
            role_event("Newsletter", area="Marketing", vertical="business", minutes=300),
        ]
        roles = recommend_roles(events, 7, tier_rates)

        assert len(roles) == 1
        assert roles[0].business_area == "Consolidated"
        assert roles[0].role_title == "Senior Operations Manager"
        assert {t.task for t in roles[0].tasks} == {"Budget review", "Newsletter"}

    def test_not_enough_hours(self, tier_rates):
        roles = recommend_roles([role_event("Build API", minutes=240)], 7, tier_rates)
        assert roles == []

    def test_hours_are_normalized_per_week(self, tier_rates):
        # 10 hours over two weeks is only 5 hours a week
        roles = recommend_roles([role_event("Build API", minutes=600)], 14, tier_rates)
        assert roles == []

    def test_non_delegable_tiers_are_ignored(self, tier_rates):
        roles = recommend_roles([role_event("Board prep", tier="unique", minutes=1200)], 7, tier_rates)
        assert roles == []

    def test_ea_role_has_no_vertical(self, tier_rates):
        roles = recommend_roles(
            [role_event("Travel booking", tier="ea", area="Operations", vertical="business", minutes=600)],
            7,
            tier_rates,
        )
        assert roles[0].role_title == "Executive Assistant"
        assert roles[0].vertical is None
        assert roles[0].cost_annual == 7500

    def test_at_most_max_roles_largest_first(self, tier_rates):
        areas = ["Development", "Design", "Data/Analytics", "Finance", "Sales", "Marketing", "Product"]
        events = [
            role_event(f"{area} work", area=area, minutes=600 + i * 60)
            for i, area in enumerate(areas)
        ]
        roles = recommend_roles(events, 7, tier_rates)

        assert len(roles) == MAX_ROLES
        hours = [r.hours_per_week for r in roles]
        assert hours == sorted(hours, reverse=True)
        assert roles[0].business_area == "Product"
