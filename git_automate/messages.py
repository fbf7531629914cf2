"""
Placeholder commit messages.

When the user gives no message, a short random phrase such as
"quiet-harbor" is used instead. The phrase carries no meaning and no
uniqueness guarantee; it only keeps the commit message from being empty.
"""

from __future__ import annotations

import random
from typing import Optional

CONVENTIONAL_PREFIX = "feat: "

# Chance of adding a second adjective ("quiet-amber-harbor").
THREE_WORD_PROBABILITY = 0.25

ADJECTIVES = (
    "amber", "ancient", "autumn", "billowing", "bitter", "bold", "brave",
    "calm", "crimson", "curly", "damp", "dark", "dawn", "delicate",
    "divine", "dry", "eager", "empty", "falling", "fancy", "flat",
    "floral", "fragrant", "frosty", "gentle", "gleaming", "golden",
    "green", "hidden", "holy", "icy", "jolly", "late", "lingering",
    "little", "lively", "long", "lucky", "misty", "morning", "muddy",
    "nameless", "noisy", "odd", "old", "orange", "patient", "plain",
    "polished", "proud", "purple", "quiet", "rapid", "red", "restless",
    "rough", "round", "royal", "shiny", "shy", "silent", "small",
    "snowy", "soft", "solitary", "sparkling", "spring", "square",
    "steep", "still", "summer", "super", "sweet", "swift", "tiny",
    "twilight", "wandering", "weathered", "white", "wild", "winter",
    "wispy", "withered", "yellow", "young",
)

NOUNS = (
    "art", "band", "bar", "base", "bird", "block", "boat", "bonus",
    "bread", "breeze", "brook", "bush", "butterfly", "cake", "cell",
    "cherry", "cloud", "credit", "darkness", "dawn", "dew", "disk",
    "dream", "dust", "feather", "field", "fire", "firefly", "flower",
    "fog", "forest", "frog", "frost", "glade", "glitter", "grass",
    "hall", "harbor", "hat", "haze", "heart", "hill", "king", "lab",
    "lake", "leaf", "limit", "math", "meadow", "mode", "moon",
    "morning", "mountain", "mouse", "mud", "night", "paper", "pine",
    "poetry", "pond", "queen", "rain", "recipe", "resonance", "rice",
    "river", "salad", "scene", "sea", "shadow", "shape", "silence",
    "sky", "smoke", "snow", "snowflake", "sound", "star", "sun",
    "sunset", "surf", "term", "thunder", "tooth", "tree", "truth",
    "union", "unit", "violet", "voice", "water", "waterfall", "wave",
    "wildflower", "wind", "wood",
)


def random_phrase(rng: Optional[random.Random] = None) -> str:
    """
    Return a hyphen-joined phrase of two or three lowercase words.
    """

    rng = rng or random.Random()
    words = [rng.choice(ADJECTIVES)]
    if rng.random() < THREE_WORD_PROBABILITY:
        words.append(rng.choice(ADJECTIVES))
    words.append(rng.choice(NOUNS))
    return "-".join(words)


def generate_commit_message(
    template: str,
    conventional: bool,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Generate a commit message for a commit made without one.

    With conventional set, the phrase is prefixed with "feat: " whatever
    the configured template says. Otherwise the bare phrase is returned
    and template is not applied.
    """

    phrase = random_phrase(rng)
    if conventional:
        return f"{CONVENTIONAL_PREFIX}{phrase}"
    return phrase
