"""Data models for the merge_feeds pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

# Match strategies, in cascade order
EXACT_FULL = "exact_full"
EXACT_CORE = "exact_core"
FRAGMENT_COLUMN = "fragment_column"
PREFIX_REMOVED = "prefix_removed"
REVERSE_PREFIX = "reverse_prefix"
FUZZY = "fuzzy"

# Orchestrator states
STATE_INIT = "init"
STATE_INDEX_BUILT = "index_built"
STATE_PROCESSING = "processing"
STATE_DONE = "done"
STATE_FAILED = "failed"


@dataclass(frozen=True)
class ColumnFragment:
    """A title recognised as a (possibly abbreviated) recurring column name."""
    fragment: str
    full_name: str
    confidence: float


@dataclass(frozen=True)
class ParsedTitle:
    """Title split into an optional column label and the core headline."""
    full_title: str
    core_title: str
    column_name: Optional[str] = None
    is_fragment: bool = False
    fragment_confidence: float = 0.0
    # Canonical column of a fragment whose text does not start with that name
    fragment_column: Optional[str] = None

    @property
    def column(self) -> Optional[str]:
        return self.column_name or self.fragment_column


@dataclass
class ItemMetadata:
    """Normalized view of a single feed item."""
    title: Optional[str] = None
    parsed_title: Optional[ParsedTitle] = None
    link: Optional[str] = None
    author: Optional[str] = None
    extracted_author: Optional[str] = None
    pub_date: Optional[datetime] = None
    description: Optional[str] = None
    guid: Optional[str] = None

    @property
    def effective_author(self) -> Optional[str]:
        """Explicit creator tag, falling back to the byline-derived author."""
        return self.author or self.extracted_author

    @property
    def identity(self) -> Optional[str]:
        """Stable identity of the item: guid, else link, else title."""
        return self.guid or self.link or self.title


@dataclass
class IndexEntry:
    """A secondary-feed item as stored in the SecondaryIndex."""
    metadata: ItemMetadata
    normalized_full: str
    normalized_core: str
    author: str
    column: Optional[str]
    position: int
    fragment_confidence: float = 0.0


@dataclass
class MatchScore:
    title_similarity: float = 0.0
    author_match: float = 0.0
    column_match: float = 0.0
    date_proximity: float = 0.0
    fragment_bonus: float = 0.0
    total: float = 0.0


@dataclass
class MatchResult:
    entry: IndexEntry
    score: MatchScore
    strategy: str


@dataclass
class MatchRecord:
    """Summary of an accepted match kept in the report."""
    primary_title: str
    secondary_title: str
    strategy: str
    score: MatchScore
    link: str


@dataclass
class UnmatchedRecord:
    title: str
    author: Optional[str]
    pub_date: Optional[datetime]


@dataclass
class ErrorRecord:
    type: str
    message: str
    timestamp: datetime


@dataclass
class MergeStats:
    primary_items: int = 0
    secondary_items: int = 0
    indexed_items: int = 0
    excluded_secondary_items: int = 0
    exact_matches: int = 0
    fragment_matches: int = 0
    fuzzy_matches: int = 0
    no_matches: int = 0
    duplicates_skipped: int = 0
    skipped_items: int = 0

    @property
    def total_matched(self) -> int:
        return self.exact_matches + self.fragment_matches + self.fuzzy_matches


@dataclass
class MergeReport:
    """Structured record of one merge run, written next to the merged feed."""
    started_at: datetime
    state: str = STATE_INIT
    finished_at: Optional[datetime] = None
    duration_ms: Optional[int] = None
    config: dict = field(default_factory=dict)
    stats: MergeStats = field(default_factory=MergeStats)
    strategy_counts: dict[str, int] = field(default_factory=dict)
    matches: list[MatchRecord] = field(default_factory=list)
    unmatched: list[UnmatchedRecord] = field(default_factory=list)
    errors: list[ErrorRecord] = field(default_factory=list)
    final_item_count: int = 0
