# SPDX-License-Identifier: MIT

from conftest import day, make_activity, make_link
from fourd.service.timeframe import milestones, project_timeframe


class TestProjectTimeframe:
    def test_spans_planned_actual_and_overrides(self):
        activities = [
            make_activity("A", planned_start=day(2), planned_end=day(8), actual_end=day(11)),
            make_activity("B", planned_start=day(4), planned_end=day(6)),
        ]
        links = [make_link("e1", "B", override_start=day(-3))]

        assert project_timeframe(activities, links) == (day(-3), day(11))

    def test_no_dates(self):
        assert project_timeframe([make_activity("A")]) is None


class TestMilestones:
    def test_sorted_by_date_then_id(self):
        activities = [
            make_activity("C", planned_start=day(5)),
            make_activity("B", planned_start=day(1)),
            make_activity("A", planned_start=day(5)),
            make_activity("D"),
        ]

        assert [milestone["activity_id"] for milestone in milestones(activities)] == [
            "B",
            "A",
            "C",
        ]
