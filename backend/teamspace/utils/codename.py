"""프로젝트 코드네임(형용사 + 동물) 생성기입니다. 표시용 별칭이며 고유성은 보장하지 않습니다."""

import random
from typing import Optional

ADJECTIVES = (
    "Agile", "Brave", "Creative", "Dynamic", "Elegant", "Fearless",
    "Gallant", "Heroic", "Innovative", "Jubilant", "Keen", "Legendary",
    "Magnificent", "Noble", "Optimistic", "Powerful", "Quick", "Radiant",
    "Stellar", "Tenacious", "Unwavering", "Valiant", "Wise", "Exemplary",
    "Youthful", "Zealous", "Animated", "Impressive",
)

NOUNS = (
    "Aardvark", "Bison", "Cheetah", "Dolphin", "Eagle", "Falcon", "Gerbil",
    "Hawk", "Iguana", "Jaguar", "Koala", "Lemur", "Macaw", "Narwhal",
    "Ocelot", "Panther", "Quokka", "Rhino", "Salamander", "Tiger",
    "Urial", "Vulture", "Walrus", "Xerus", "Yak", "Zebra", "Porcupine",
)


def generate_codename(rng: Optional[random.Random] = None) -> str:
    picker = rng or random
    return f"{picker.choice(ADJECTIVES)} {picker.choice(NOUNS)}"
