#!/usr/bin/env python3
"""
Flight summary functions for the OFP flight logger
"""

from dataclasses import dataclass
from typing import List, Sequence

from ofp_model import PassageKind, PassageRecord
from ofp_utils import kgToTonnes, toHHmm
from ofp_constants import MINUTES_PER_HOUR, OFP_LEG_ARROW


@dataclass
class LegSummary:
    """Time and fuel used between two consecutive passages"""
    from_name: str
    to_name: str
    minutes: float
    fuel_consumed: float

    @property
    def fuel_flow(self) -> float:
        """Average fuel flow over the leg in kg/h"""
        if self.minutes <= 0:
            return 0.0
        return self.fuel_consumed / (self.minutes / MINUTES_PER_HOUR)

    @property
    def name(self) -> str:
        return f"{self.from_name}{OFP_LEG_ARROW}{self.to_name}"


def legSummaries(records: Sequence[PassageRecord]) -> List[LegSummary]:
    """Build one leg per consecutive pair of passages"""
    legs = []
    for previous, current in zip(records, records[1:]):
        elapsed = current.timestamp - previous.timestamp
        legs.append(LegSummary(
            from_name=previous.name,
            to_name=current.name,
            minutes=elapsed.total_seconds() / 60,
            fuel_consumed=previous.fuel_remaining - current.fuel_remaining,
        ))
    return legs


def flightSummary(records: Sequence[PassageRecord], aircraft_title: str = '') -> str:
    """Generate a console summary of the passages logged during a flight"""
    if not records:
        return "No GPS fixes were passed during this monitoring session."

    heading = f"Flight completed! {len(records)} GPS fixes were logged."
    if aircraft_title:
        heading += f" ({aircraft_title})"
    underline = '-' * len(heading)

    lines = [heading, underline]
    for record in records:
        marker = {
            PassageKind.TAKEOFF: "DEP",
            PassageKind.LANDING: "ARR",
        }.get(record.kind, "FIX")
        lines.append(f"  {marker} {record.fix_name:<12} {toHHmm(record.timestamp)} • "
                     f"{kgToTonnes(record.fuel_remaining):.1f} t "
                     f"({record.fuel_remaining_percentage:.1f}%)")
    return '\n'.join(lines)
