"""Configuration loader for merge_feeds."""

from dataclasses import asdict, dataclass, field
from pathlib import Path

from common.config import find_config_path, load_yaml

# Config directory at the repository root
CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"


@dataclass
class FeedsConfig:
    primary_url: str = "https://www.thearknewspaper.com/blog-feed.xml"
    secondary_url: str = (
        "https://thearknewspaper-ca.newsmemory.com/rss.php"
        "?edition=The%20Ark&section=Main&device=std&images=none&content=abstract"
    )
    # Published location of the merged feed, used for the atom self link
    self_link: str = "https://arkeditor.github.io/rss-feed-merger/merged_rss_feed.xml"
    secondary_domain_marker: str = "newsmemory.com"
    primary_domain_marker: str = "thearknewspaper.com"


@dataclass
class ThresholdsConfig:
    fuzzy_match: float = 0.55
    fragment_match: float = 0.8
    column_match_bonus: float = 0.3
    narrow_fuzzy_candidates: bool = False

    def __post_init__(self) -> None:
        for name in ("fuzzy_match", "fragment_match"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Invalid threshold {name}: {value}. Must be between 0 and 1")
        if self.column_match_bonus < 0:
            raise ValueError(f"Invalid column_match_bonus: {self.column_match_bonus}. Must be >= 0")


@dataclass
class WeightsConfig:
    title_similarity: float = 0.7
    author_match: float = 0.2
    column_match: float = 0.05
    date_proximity: float = 0.05

    def __post_init__(self) -> None:
        weights = (self.title_similarity, self.author_match, self.column_match, self.date_proximity)
        if any(w < 0 for w in weights):
            raise ValueError(f"Scoring weights must be non-negative, got {weights}")

        # Validate weights sum to 1.0
        if abs(sum(weights) - 1.0) > 0.001:
            raise ValueError(f"Scoring weights must sum to 1.0, got {sum(weights)}")


@dataclass
class NetworkConfig:
    request_timeout: float = 10.0
    max_retries: int = 3
    retry_delay: float = 1.0
    user_agent: str = "rss-feed-merger/1.0 (RSS reader)"

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ValueError(f"Invalid max_retries: {self.max_retries}. Must be >= 1")


@dataclass
class OutputConfig:
    output_file: str = "merged_rss_feed.xml"
    report_file: str = "merge_report.json"
    generate_report: bool = True


@dataclass
class MergeConfig:
    feeds: FeedsConfig = field(default_factory=FeedsConfig)
    thresholds: ThresholdsConfig = field(default_factory=ThresholdsConfig)
    weights: WeightsConfig = field(default_factory=WeightsConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(config_name: str | None = None) -> MergeConfig:
    """Load configuration from YAML file.

    Args:
        config_name: Name of config file (without .yaml extension) or a path.
                    If None, uses CONFIG_ENV env var or "prod".

    Returns:
        Loaded MergeConfig object
    """
    config_path = find_config_path(config_name, CONFIG_DIR, env_var="CONFIG_ENV")
    return parse_config(load_yaml(config_path))


def parse_config(data: dict) -> MergeConfig:
    """Parse config dictionary into MergeConfig; absent keys take defaults."""
    return MergeConfig(
        feeds=FeedsConfig(**(data.get("feeds") or {})),
        thresholds=ThresholdsConfig(**(data.get("thresholds") or {})),
        weights=WeightsConfig(**(data.get("weights") or {})),
        network=NetworkConfig(**(data.get("network") or {})),
        output=OutputConfig(**(data.get("output") or {})),
    )
