# tests/test_taxonomy.py
"""Unit tests for label → category classification."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from detection_dashboard.services.taxonomy import classify


class TestClassify:
    @pytest.mark.parametrize("label,expected", [
        ("person", "people"),
        ("People crossing", "people"),
        ("BUS", "vehicles"),
        ("motorcycle", "vehicles"),
        ("bird", "animals"),
        ("laptop", "objects"),
    ])
    def test_single_category_labels(self, label, expected):
        assert classify(label) == expected

    def test_vehicle_checked_before_animal(self):
        assert classify("red car with a dog inside") == "vehicles"

    def test_people_checked_before_everything(self):
        assert classify("person riding a truck next to a cat") == "people"

    @pytest.mark.parametrize("label", [None, ""])
    def test_missing_label_is_objects(self, label):
        assert classify(label) == "objects"
