"""
Sexagenary (GanZhi) reference tables and pillar arithmetic.

Handles:
- The 10 Heavenly Stems and 12 Earthly Branches as fixed ordered cycles
- Stem polarity classification (YANG / YIN)
- Parsing two-character pillar labels such as "甲子"
- Stepping a pillar one position along the 60-element cycle

Design principle: stems and branches always move in lock-step, so any
stepped pillar stays one of the 60 valid combinations.
"""

from dataclasses import dataclass
from enum import Enum


class InvalidPillarError(ValueError):
    """A pillar label whose stem or branch is not in the reference cycles."""


# ============================================================
# FUNDAMENTAL DATA STRUCTURES
# ============================================================

class Polarity(Enum):
    YANG = "YANG"
    YIN = "YIN"


class Element(Enum):
    WOOD = "wood"
    FIRE = "fire"
    EARTH = "earth"
    METAL = "metal"
    WATER = "water"


@dataclass(frozen=True)
class HeavenlyStem:
    chinese: str
    pinyin: str
    element: Element
    polarity: Polarity
    index: int  # 0-9 in the cycle

    def __str__(self):
        return f"{self.pinyin} ({self.polarity.value.lower()} {self.element.value})"


@dataclass(frozen=True)
class EarthlyBranch:
    chinese: str
    pinyin: str
    animal: str
    element: Element
    index: int  # 0-11 in the cycle

    def __str__(self):
        return f"{self.pinyin} ({self.animal})"


# ============================================================
# STEM AND BRANCH DEFINITIONS
# ============================================================

HEAVENLY_STEMS = (
    HeavenlyStem("甲", "Jia", Element.WOOD, Polarity.YANG, 0),
    HeavenlyStem("乙", "Yi", Element.WOOD, Polarity.YIN, 1),
    HeavenlyStem("丙", "Bing", Element.FIRE, Polarity.YANG, 2),
    HeavenlyStem("丁", "Ding", Element.FIRE, Polarity.YIN, 3),
    HeavenlyStem("戊", "Wu", Element.EARTH, Polarity.YANG, 4),
    HeavenlyStem("己", "Ji", Element.EARTH, Polarity.YIN, 5),
    HeavenlyStem("庚", "Geng", Element.METAL, Polarity.YANG, 6),
    HeavenlyStem("辛", "Xin", Element.METAL, Polarity.YIN, 7),
    HeavenlyStem("壬", "Ren", Element.WATER, Polarity.YANG, 8),
    HeavenlyStem("癸", "Gui", Element.WATER, Polarity.YIN, 9),
)

EARTHLY_BRANCHES = (
    EarthlyBranch("子", "Zi", "Rat", Element.WATER, 0),
    EarthlyBranch("丑", "Chou", "Ox", Element.EARTH, 1),
    EarthlyBranch("寅", "Yin", "Tiger", Element.WOOD, 2),
    EarthlyBranch("卯", "Mao", "Rabbit", Element.WOOD, 3),
    EarthlyBranch("辰", "Chen", "Dragon", Element.EARTH, 4),
    EarthlyBranch("巳", "Si", "Snake", Element.FIRE, 5),
    EarthlyBranch("午", "Wu", "Horse", Element.FIRE, 6),
    EarthlyBranch("未", "Wei", "Goat", Element.EARTH, 7),
    EarthlyBranch("申", "Shen", "Monkey", Element.METAL, 8),
    EarthlyBranch("酉", "You", "Rooster", Element.METAL, 9),
    EarthlyBranch("戌", "Xu", "Dog", Element.EARTH, 10),
    EarthlyBranch("亥", "Hai", "Pig", Element.WATER, 11),
)

# Lookup helpers
STEM_BY_CHINESE = {s.chinese: s for s in HEAVENLY_STEMS}
BRANCH_BY_CHINESE = {b.chinese: b for b in EARTHLY_BRANCHES}

# The 60 valid pillars in cycle order, 甲子 first and 癸亥 last
SIXTY_CYCLE = tuple(
    HEAVENLY_STEMS[i % 10].chinese + EARTHLY_BRANCHES[i % 12].chinese
    for i in range(60)
)


# ============================================================
# PILLARS
# ============================================================

@dataclass(frozen=True)
class Pillar:
    stem: HeavenlyStem
    branch: EarthlyBranch

    @classmethod
    def parse(cls, label: str) -> "Pillar":
        """
        Parse a two-character label into its stem and branch.

        Raises:
            InvalidPillarError: if either symbol is missing or unknown
        """
        label = (label or "").strip()
        stem = STEM_BY_CHINESE.get(label[:1])
        branch = BRANCH_BY_CHINESE.get(label[1:2])
        if stem is None or branch is None:
            raise InvalidPillarError(f"Invalid pillar: {label!r}")
        return cls(stem=stem, branch=branch)

    @property
    def label(self) -> str:
        return self.stem.chinese + self.branch.chinese

    def step(self, offset: int) -> "Pillar":
        """Move both symbols by the same offset, wrapping each cycle."""
        return Pillar(
            stem=HEAVENLY_STEMS[(self.stem.index + offset) % 10],
            branch=EARTHLY_BRANCHES[(self.branch.index + offset) % 12],
        )

    def __str__(self):
        return (f"{self.label} {self.stem.pinyin} {self.branch.pinyin} "
                f"({self.stem.polarity.value.lower()} {self.stem.element.value} "
                f"{self.branch.animal})")

    def to_dict(self):
        return {
            "label": self.label,
            "stem": {
                "chinese": self.stem.chinese,
                "pinyin": self.stem.pinyin,
                "element": self.stem.element.value,
                "polarity": self.stem.polarity.value,
            },
            "branch": {
                "chinese": self.branch.chinese,
                "pinyin": self.branch.pinyin,
                "animal": self.branch.animal,
                "element": self.branch.element.value,
            },
            "description": str(self),
        }


def cycle_position(label: str) -> int:
    """Position (0-59) of a valid pillar in the sexagenary cycle."""
    try:
        return SIXTY_CYCLE.index(label)
    except ValueError:
        raise InvalidPillarError(f"Not a sexagenary pillar: {label!r}") from None


def classify_polarity(pillar: str) -> Polarity:
    """
    Polarity of a pillar's stem.

    Empty or unrecognised input falls back to YANG instead of failing, so
    half-entered form data can still be displayed. Strict callers must check
    the stem themselves.
    """
    if not pillar:
        return Polarity.YANG
    stem = STEM_BY_CHINESE.get(pillar.strip()[:1])
    if stem is None:
        return Polarity.YANG
    return stem.polarity


def step_pillar(month_pillar: str, direction) -> str:
    """
    Step a month pillar one position along the 60-cycle to get the first
    decade (Da Yun) pillar.

    Args:
        month_pillar: two-character label, e.g. "甲子"
        direction: a luck.Direction; FORWARD steps +1, BACKWARD steps -1

    Returns:
        The neighbouring pillar label, e.g. "乙丑" or "癸亥" for "甲子"

    Raises:
        InvalidPillarError: if the stem or branch symbol is unknown
    """
    pillar = Pillar.parse(month_pillar)
    return pillar.step(direction.offset).label
