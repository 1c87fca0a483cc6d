"""Difficulty tiers for the automated opponent."""

from dataclasses import dataclass


@dataclass
class DifficultyProfile:
    name: str
    title: str              # display label e.g. "Medium"
    subtitle: str           # one-line description for the selection screen
    strategy: str           # "random", "capture" or "search"
    search_depth: int       # plies searched by the "search" strategy


DIFFICULTY_PROFILES: dict[str, DifficultyProfile] = {
    "easy":   DifficultyProfile("easy",   "Easy",   "Random moves",   "random",  0),
    "medium": DifficultyProfile("medium", "Medium", "Strategic play", "capture", 1),
    "hard":   DifficultyProfile("hard",   "Hard",   "Expert AI",      "search",  2),
}

DEFAULT_DIFFICULTY = "easy"


def get_profile(name: str | None) -> DifficultyProfile:
    """Look up a difficulty profile by name, falling back to the default."""
    return DIFFICULTY_PROFILES.get((name or "").lower(), DIFFICULTY_PROFILES[DEFAULT_DIFFICULTY])
