from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import InvalidRequest

MAX_TITLE_CHARS = 150


class Mode(str, Enum):
    DETAILED = "Detailed Report"
    HEADLINES_ONLY = "Headlines Only"

    @classmethod
    def parse(cls, value: Any) -> "Mode":
        """Accept the enum itself, its value, its name, or the UI aliases."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for mode in cls:
            if text in (mode.value.lower(), mode.name.lower()):
                return mode
        if text in ("summary", "detailed", "cards"):
            return cls.DETAILED
        if text in ("overview", "headlines"):
            return cls.HEADLINES_ONLY
        raise InvalidRequest(f"Unknown mode: {value!r}")


@dataclass(frozen=True)
class RequestKey:
    """Cache identity of a request. The exclusion list is deliberately not part of it."""
    region: str
    category: str
    mode: Mode
    model: str
    language: str

    def as_string(self) -> str:
        return f"{self.region}-{self.category}-{self.mode.value}-{self.model}-{self.language}"


@dataclass(frozen=True)
class CandidateItem:
    title: str
    link: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "link": self.link}


@dataclass(frozen=True)
class Headline:
    title: str
    link: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "link": self.link}


@dataclass(frozen=True)
class NewsPoint:
    """
    Canonical output unit.

    WARNING: Do not change fields lightly. `to_dict` is the wire contract.
    """
    title: str
    summary: str
    source_name: str
    source_url: str

    def is_complete(self) -> bool:
        return all((self.title, self.summary, self.source_name, self.source_url))

    def to_dict(self) -> Dict[str, str]:
        return {
            "title": self.title,
            "summary": self.summary,
            "sourceName": self.source_name,
            "sourceUrl": self.source_url,
        }


@dataclass(frozen=True)
class ResultSet:
    points: Tuple[NewsPoint, ...] = ()
    # Set on fallback results; kept out of to_dict() and equality.
    degraded: bool = field(default=False, compare=False)

    def __len__(self) -> int:
        return len(self.points)

    def titles(self) -> List[str]:
        return [p.title for p in self.points]

    def to_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {"points": [p.to_dict() for p in self.points]}


@dataclass(frozen=True)
class CacheEntry:
    key: RequestKey
    data: ResultSet
    timestamp: float
