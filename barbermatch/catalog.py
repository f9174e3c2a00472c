"""Haircut options barbers can list on their profile."""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class HaircutOption:
    id: str
    name: str
    gender: str
    is_custom: bool = False
    default_image_hint: Optional[str] = None
    example_image_url: Optional[str] = None


def _option(id: str, name: str, gender: str, hint: str, label: str, is_custom: bool = False) -> HaircutOption:
    return HaircutOption(
        id=id,
        name=name,
        gender=gender,
        is_custom=is_custom,
        default_image_hint=hint,
        example_image_url=f"https://placehold.co/100x100.png?text={label}",
    )


MENS_HAIRCUT_OPTIONS: List[HaircutOption] = [
    _option("men-crew-cut", "Crew Cut", "men", "men crew cut hairstyle", "Crew+Cut"),
    _option("men-fade", "Fade", "men", "men fade haircut", "Fade"),
    _option("men-quiff", "Quiff", "men", "men quiff hairstyle", "Quiff"),
    _option("men-undercut", "Undercut", "men", "men undercut hairstyle", "Undercut"),
    _option("men-buzz-cut", "Buzz Cut", "men", "men buzz cut", "Buzz"),
    _option("men-side-part", "Side Part", "men", "men side part", "Side+Part"),
    _option("men-taper-cut", "Taper Cut", "men", "men taper cut", "Taper"),
    _option("men-slick-back", "Slick Back", "men", "men slick back", "Slick+Back"),
    _option("men-pompadour", "Pompadour", "men", "men pompadour", "Pompadour"),
    _option("men-custom", "Custom Men's Haircut", "men", "men custom haircut", "Custom+Men", is_custom=True),
]

WOMENS_HAIRCUT_OPTIONS: List[HaircutOption] = [
    _option("women-bob", "Bob Cut", "women", "women bob cut hairstyle", "Bob"),
    _option("women-pixie", "Pixie Cut", "women", "women pixie cut hairstyle", "Pixie"),
    _option("women-layers", "Long Layers", "women", "women long layers hairstyle", "Layers"),
    _option("women-bangs", "Bangs (Fringe)", "women", "women bangs hairstyle", "Bangs"),
    _option("women-lob", "Lob (Long Bob)", "women", "women lob hairstyle", "Lob"),
    _option("women-shag", "Shag Haircut", "women", "women shag haircut", "Shag"),
    _option("women-balayage", "Balayage Color", "women", "women balayage hair", "Balayage"),
    _option("women-updo", "Updo Styling", "women", "women updo hairstyle", "Updo"),
    _option("women-perms", "Perm", "women", "women perm hairstyle", "Perm"),
    _option(
        "women-custom", "Custom Women's Haircut/Styling", "women", "women custom haircut", "Custom+Women",
        is_custom=True,
    ),
]

ALL_HAIRCUT_OPTIONS: List[HaircutOption] = MENS_HAIRCUT_OPTIONS + WOMENS_HAIRCUT_OPTIONS

_OPTIONS_BY_ID: Dict[str, HaircutOption] = {option.id: option for option in ALL_HAIRCUT_OPTIONS}


def get_haircut_option(option_id: str) -> Optional[HaircutOption]:
    return _OPTIONS_BY_ID.get(option_id)


def list_haircut_options(gender: Optional[str] = None) -> List[HaircutOption]:
    if gender is None:
        return list(ALL_HAIRCUT_OPTIONS)
    return [option for option in ALL_HAIRCUT_OPTIONS if option.gender == gender]
