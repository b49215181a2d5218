"""Moving floors and ceilings triggered by sector tags."""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass, field
from typing import List, Optional

from .constants import MAXPLATFORMS
from .ticker import TickerList
from .world import Sector, World, move_sector_plane


class PlatType(enum.Enum):
    INFINITE_UP_DOWN = 0
    RAISE_STAIRS = 1


class PlatStatus(enum.Enum):
    UP = 0
    DOWN = 1
    WAIT = 2


@dataclass(eq=False)
class Platform:
    """A sector plane moving between ``low`` and ``high``."""

    sector: Sector
    plat_type: PlatType
    floor: bool
    speed: float = 0.0
    low: float = 0.0
    high: float = 0.0
    status: PlatStatus = PlatStatus.UP
    reverseable: bool = False
    manager: Optional["PlatformManager"] = field(default=None, repr=False)

    def tick(self) -> None:
        """Advance one update and react when the destination is reached."""
        if self.status is PlatStatus.UP:
            done = move_sector_plane(self.sector, self.speed, self.high, self.floor, True)
        elif self.status is PlatStatus.DOWN:
            done = move_sector_plane(self.sector, self.speed, self.low, self.floor, False)
        else:
            done = False
        if not done:
            return
        if self.plat_type is PlatType.INFINITE_UP_DOWN:
            self.status = PlatStatus.DOWN if self.status is PlatStatus.UP else PlatStatus.UP
        elif self.plat_type is PlatType.RAISE_STAIRS:
            self.sector.specialdata = None
            self.sector.tag = 0
            if self.manager is not None:
                self.manager.remove(self)

    def reverse(self, plat_type: PlatType) -> bool:
        """Flip direction if the platform is of ``plat_type`` and reverseable."""
        if self.plat_type is not plat_type or not self.reverseable:
            return False
        if self.status is PlatStatus.UP:
            self.status = PlatStatus.DOWN
        elif self.status is PlatStatus.DOWN:
            self.status = PlatStatus.UP
        return True


class PlatformManager:
    """Creates platforms for tagged sectors and keeps track of active ones."""

    def __init__(self, world: World, tickers: TickerList) -> None:
        self.world = world
        self.tickers = tickers
        self.active: List[Platform] = []

    def find_sector_from_tag(self, tag: int, start: int) -> Optional[int]:
        """Index of the first sector at or after ``start`` carrying ``tag``."""
        for index, sector in enumerate(self.world.sectors[start:], start):
            if sector.tag == tag:
                return index
        return None

    def create(
        self,
        tag: int,
        plat_type: PlatType,
        floor: bool,
        search_start: int = 0,
        height: float = 0.0,
    ) -> Optional[Platform]:
        """Start a platform on the first sector with ``tag``; reverse it if already moving."""
        if tag <= 0:
            return None
        index = self.find_sector_from_tag(tag, search_start)
        if index is None:
            return None
        sector = self.world.sectors[index]
        if isinstance(sector.specialdata, Platform):
            sector.specialdata.reverse(plat_type)
            return None

        plat = Platform(sector=sector, plat_type=plat_type, floor=floor, manager=self)
        sector.specialdata = plat
        self.tickers.add(plat)

        if plat_type is PlatType.INFINITE_UP_DOWN:
            plat.speed = 10.0
            plat.low = sector.zfloor
            plat.high = sector.zceil
            plat.status = PlatStatus.UP
            plat.reverseable = True
        else:
            new_height = height + 2.0
            self.create(tag, plat_type, floor, index + 1, new_height)
            plat.speed = 1.0
            plat.high = new_height + sector.zfloor
            plat.status = PlatStatus.UP
            plat.reverseable = False

        self._register(plat)
        return plat

    def _register(self, plat: Platform) -> None:
        if len(self.active) >= MAXPLATFORMS:
            print("PLATS FULL", file=sys.stderr)
            return
        self.active.append(plat)

    def remove(self, platform: Platform) -> None:
        """Stop ticking a platform and forget it."""
        self.tickers.remove(platform)
        if platform in self.active:
            self.active.remove(platform)