from tutorhub.domain.scheduling.build_slots import enumerate_slots, render_slots
from tutorhub.domain.scheduling.conflicts import filter_conflicts, overlaps
from tutorhub.domain.scheduling.timezones import anchor, to_zone

__all__ = ["anchor", "enumerate_slots", "filter_conflicts", "overlaps", "render_slots", "to_zone"]
