# SPDX-License-Identifier: MIT

from conftest import make_link
from fourd.service.link_index import LinkIndex


class TestLinkIndex:
    """Grouping links by activity in a stable element order."""

    def test_links_sorted_by_element_id(self, wall_links):
        index = LinkIndex(wall_links)

        assert [link["element_stable_id"] for link in index.links_for_activity("A")] == [
            "wall-1",
            "wall-2",
            "wall-3",
            "wall-4",
        ]

    def test_order_independent_of_input_order(self, wall_links):
        forward = LinkIndex(wall_links).links_for_activity("A")
        backward = LinkIndex(list(reversed(wall_links))).links_for_activity("A")

        assert forward == backward

    def test_duplicate_pairs_are_dropped(self):
        index = LinkIndex([make_link("e1", "A"), make_link("e1", "A"), make_link("e1", "B")])

        assert len(index) == 2
        assert index.element_ids() == ["e1"]

    def test_unknown_activity_has_no_links(self, wall_links):
        assert LinkIndex(wall_links).links_for_activity("missing") == []

    def test_returned_lists_are_copies(self, wall_links):
        index = LinkIndex(wall_links)
        index.links_for_activity("A").clear()

        assert len(index.links_for_activity("A")) == 4

    def test_activity_ids(self):
        index = LinkIndex([make_link("e1", "B"), make_link("e2", "A")])

        assert sorted(index.activity_ids()) == ["A", "B"]
