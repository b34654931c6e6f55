from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the field MIS pipeline.

Built by fieldmis.config.loader after schema validation and environment
overrides. Passed explicitly to every service; nothing reads module-level URLs.
"""

__all__ = [
    "DEFAULT_ACTIVITY_COLUMNS",
    "HttpConfig",
    "UserEntry",
    "FieldMISConfig",
]

# Activity column fragments of the wide contribution sheet
DEFAULT_ACTIVITY_COLUMNS: tuple[str, ...] = (
    "BYP-NS",
    "MOBILE IRR",
    "PROCESSING",
    "ASC",
    "CROP MOD",
    "BYP-BFE",
    "FISHERIES",
    "GOAT SHED",
    "ECO-FARMPOND",
    "FIXED IRRIG",
)


@dataclass(frozen=True)
class HttpConfig:
    timeout_seconds: float = 20.0
    cache_bust_param: str = "_"  # query key carrying the millisecond timestamp
    max_workers: int = 4  # fan-out width when a report needs several feeds


@dataclass(frozen=True)
class UserEntry:
    """Credential table entry. ``password_hash`` is a werkzeug hash string."""
    username: str
    password_hash: str
    role: str = "field"


@dataclass(frozen=True)
class FieldMISConfig:
    feeds: dict[str, str]  # feed name -> published CSV URL
    apps_script_url: str | None
    http: HttpConfig = field(default_factory=HttpConfig)
    strict_csv: bool = False  # default parser mode for feeds without an override
    activity_columns: tuple[str, ...] = DEFAULT_ACTIVITY_COLUMNS
    users: tuple[UserEntry, ...] = ()
    logs_dir: str = "./logs"

    def feed_url(self, name: str) -> str | None:
        return self.feeds.get(name)
