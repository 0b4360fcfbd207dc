"""
Home screen data models

Provides immutable data transfer objects for the provider payloads and the
aggregated home snapshot observed by the presentation layer.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Profile:
    """Viewer profile as returned by the profile provider."""
    nickname: str
    profile_image_url: Optional[str]
    coins: int


@dataclass(frozen=True)
class Friend:
    """Single friend list entry. Only the list length reaches the snapshot."""
    player_id: int
    nickname: str


@dataclass(frozen=True)
class RawMatch:
    """Match history entry before enrichment; role is not authoritative yet."""
    id: int
    date: str
    duration: str
    role: str


@dataclass(frozen=True)
class Match:
    """Match history entry shown on the home screen."""
    id: int
    played_at: str
    duration_label: str
    role_label: str

    @classmethod
    def from_raw(cls, raw: RawMatch, role_label: Optional[str] = None) -> 'Match':
        return cls(
            id=raw.id,
            played_at=raw.date,
            duration_label=raw.duration,
            role_label=raw.role if role_label is None else role_label
        )


@dataclass(frozen=True)
class HomeSnapshot:
    """Complete home screen state at one instant."""
    # Loading flags
    profile_loading: bool = False
    matches_loading: bool = False

    # Profile slice
    display_name: str = ""
    avatar_ref: Optional[str] = None
    coin_balance: int = 0

    # Friends slice
    friend_count: int = 0

    # Matches slice
    match_count: int = 0
    matches: Tuple[Match, ...] = ()

    # Most recent failure across all sections
    last_error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to a plain dictionary"""
        data = asdict(self)
        data['matches'] = [asdict(match) for match in self.matches]
        return data
