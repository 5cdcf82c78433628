# detection_dashboard/services/taxonomy.py
"""
Maps a free-text detector label onto one of four dashboard categories.
Rules are checked in order and the first hit wins, so "red car with a dog"
is a vehicle. Historical aggregates depend on this order.
"""

from typing import Optional

PEOPLE = "people"
VEHICLES = "vehicles"
ANIMALS = "animals"
OBJECTS = "objects"

CATEGORIES = (PEOPLE, VEHICLES, ANIMALS, OBJECTS)
CATEGORY_LABELS = {PEOPLE: "People", VEHICLES: "Vehicles", ANIMALS: "Animals", OBJECTS: "Objects"}

CATEGORY_RULES = (
    (PEOPLE, ("person", "people")),
    (VEHICLES, ("car", "truck", "bus", "motorcycle", "vehicle")),
    (ANIMALS, ("dog", "cat", "bird", "animal")),
)


def classify(label: Optional[str]) -> str:
    if not label:
        return OBJECTS
    lowered = label.lower()
    for category, tokens in CATEGORY_RULES:
        if any(token in lowered for token in tokens):
            return category
    return OBJECTS
