"""Tests for via connections and the via connectivity graph."""

from __future__ import annotations

import math
import unittest

from itfstack.data import ViaConnection, ViaStack, ViaType


def _chain() -> ViaStack:
    vias = ViaStack()
    vias.add_via(ViaConnection("via1", "metal1", "metal2", 0.04, 2.5))
    vias.add_via(ViaConnection("via2", "metal2", "metal3", 0.09, 1.2))
    return vias


class TestViaConnection(unittest.TestCase):

    def test_width_from_area(self):
        self.assertAlmostEqual(ViaConnection("v", "a", "b", area=0.04).via_width, 0.2, places=12)
        self.assertEqual(ViaConnection("v", "a", "b").via_width, 0.0)

    def test_parallel_resistance(self):
        via = ViaConnection("v", "a", "b", resistance_per_via=3.0)
        self.assertEqual(via.calculate_resistance(), 3.0)
        self.assertEqual(via.calculate_resistance(4), 0.75)
        self.assertTrue(math.isinf(via.calculate_resistance(0)))

    def test_connects_in_either_order(self):
        via = ViaConnection("v", "metal1", "metal2")
        self.assertTrue(via.connects_layers("metal1", "metal2"))
        self.assertTrue(via.connects_layers("metal2", "metal1"))
        self.assertFalse(via.connects_layers("metal1", "metal3"))

    def test_span_accessors(self):
        via = ViaConnection("v", "a", "b", z_position=1.5, height=0.5)
        self.assertEqual(via.bottom_z, 1.5)
        self.assertEqual(via.top_z, 2.0)


class TestViaType(unittest.TestCase):

    def test_contact(self):
        self.assertEqual(ViaConnection("c", "diff", "metal1").via_type, ViaType.CONTACT)
        self.assertEqual(ViaConnection("c", "metal1", "poly").via_type, ViaType.CONTACT)
        self.assertEqual(ViaConnection("c", "SUBSTRATE", "M1").via_type, ViaType.CONTACT)

    def test_metal(self):
        self.assertEqual(ViaConnection("v", "metal1", "metal2").via_type, ViaType.METAL)
        self.assertEqual(ViaConnection("v", "metal9", "alpa").via_type, ViaType.METAL)

    def test_other(self):
        self.assertEqual(ViaConnection("v", "M1", "M2").via_type, ViaType.OTHER)
        self.assertEqual(ViaConnection("v", "metal1", "M2").via_type, ViaType.OTHER)

    def test_contact_checked_before_metal(self):
        """'metalpoly' starts with metal but also contains poly."""
        self.assertEqual(ViaConnection("v", "metalpoly", "metal1").via_type, ViaType.CONTACT)


class TestViaStack(unittest.TestCase):

    def setUp(self):
        self.vias = _chain()

    def test_len_and_iteration(self):
        self.assertEqual(len(self.vias), 2)
        self.assertEqual([v.name for v in self.vias], ["via1", "via2"])
        self.assertFalse(ViaStack())

    def test_adjacency_lists_both_endpoints(self):
        self.assertEqual(self.vias.adjacency["metal2"], [0, 1])
        self.assertEqual(self.vias.adjacency["metal1"], [0])
        self.assertEqual([v.name for v in self.vias.get_vias_for_layer("metal2")], ["via1", "via2"])
        self.assertEqual(self.vias.get_vias_for_layer("nowhere"), [])

    def test_constructor_indexes_existing_vias(self):
        vias = ViaStack([ViaConnection("v", "a", "b")])
        self.assertEqual(vias.adjacency, {"a": [0], "b": [0]})

    def test_via_between_layers(self):
        self.assertEqual(self.vias.get_via_between_layers("metal2", "metal1").name, "via1")
        self.assertIsNone(self.vias.get_via_between_layers("metal1", "metal3"))

    def test_via_between_layers_first_wins(self):
        self.vias.add_via(ViaConnection("via1b", "metal2", "metal1"))
        self.assertEqual(self.vias.get_via_between_layers("metal1", "metal2").name, "via1")


class TestConnectionPath(unittest.TestCase):

    def setUp(self):
        self.vias = _chain()

    def test_chain(self):
        path = self.vias.get_connection_path("metal1", "metal3")
        self.assertEqual([v.name for v in path], ["via1", "via2"])

    def test_reverse_chain(self):
        path = self.vias.get_connection_path("metal3", "metal1")
        self.assertEqual([v.name for v in path], ["via2", "via1"])

    def test_same_layer_is_empty_path(self):
        self.assertEqual(self.vias.get_connection_path("metal2", "metal2"), [])

    def test_disconnected_is_none(self):
        self.vias.add_via(ViaConnection("island", "poly", "diff"))
        self.assertIsNone(self.vias.get_connection_path("metal1", "poly"))
        self.assertIsNone(self.vias.get_connection_path("metal1", "unknown"))

    def test_prefers_fewest_vias(self):
        self.vias.add_via(ViaConnection("stacked", "metal1", "metal3"))
        path = self.vias.get_connection_path("metal1", "metal3")
        self.assertEqual([v.name for v in path], ["stacked"])

    def test_equal_length_ties_follow_insertion_order(self):
        vias = ViaStack()
        vias.add_via(ViaConnection("a1", "m1", "x"))
        vias.add_via(ViaConnection("b1", "m1", "y"))
        vias.add_via(ViaConnection("b2", "y", "m2"))
        vias.add_via(ViaConnection("a2", "x", "m2"))
        self.assertEqual([v.name for v in vias.get_connection_path("m1", "m2")], ["a1", "a2"])


if __name__ == "__main__":
    unittest.main()
