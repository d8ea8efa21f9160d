"""
Configuration loading for the EOD tracker.

The entry point loads ``.env`` and hands ``os.environ`` plus the parsed CLI
arguments to :func:`load_config`. Everything downstream receives the resulting
:class:`AppConfig` explicitly and never reads process state itself.
"""

import datetime
import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

logger = logging.getLogger("eod-tracker.config")

OUTPUT_FORMATS = ("simple", "detailed")
FILE_FORMATS = ("txt", "json", "md")
DEFAULT_OUTPUT_DIR = "reports"
DEFAULT_MAX_BRANCHES = 10


class ConfigError(ValueError):
    """Fatal configuration problem, raised before any network call."""


@dataclass(frozen=True)
class AppConfig:
    token: str
    date: datetime.date
    target_users: List[str] = field(default_factory=list)
    target_repos: List[str] = field(default_factory=list)
    organization: Optional[str] = None
    debug: bool = False
    check_previous_day: bool = False
    output_format: str = "simple"
    no_files: bool = False
    output_dir: str = DEFAULT_OUTPUT_DIR
    output: str = "txt"
    max_branches: int = DEFAULT_MAX_BRANCHES


@dataclass(frozen=True)
class NotifierConfig:
    account_sid: str
    auth_token: str
    from_number: str
    to_number: str
    debug: bool = False


def _split_list(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _flag(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() == "true"


def parse_date(value: str) -> datetime.date:
    """Parse ``YYYY-MM-DD``. Raises ValueError on anything else."""
    return datetime.datetime.strptime(value.strip(), "%Y-%m-%d").date()


def normalize_repos(repos: List[str], organization: Optional[str]) -> List[str]:
    """
    Expand bare repository names to ``org/name``.

    Raises:
        ConfigError: If a bare name is given and no organization is configured
    """
    if not any("/" not in r for r in repos):
        return list(repos)
    if not organization:
        raise ConfigError(
            "Short repo names were given in TARGET_REPOS but GITHUB_ORG is not set. "
            "Set GITHUB_ORG or use full owner/name repo names."
        )
    return [r if "/" in r else f"{organization}/{r}" for r in repos]


def _resolve_date(cli_date: Optional[str], env_date: Optional[str], today: datetime.date) -> datetime.date:
    if cli_date:
        try:
            return parse_date(cli_date)
        except ValueError:
            logger.warning("Invalid --date %r. Using today.", cli_date)
            return today
    if env_date:
        if env_date.strip().upper() == "TODAY":
            return today
        try:
            return parse_date(env_date)
        except ValueError:
            logger.warning("Invalid TARGET_DATE %r. Using today's date.", env_date)
    return today


def _choice(value: Optional[str], allowed: Tuple[str, ...], default: str, name: str) -> str:
    if not value:
        return default
    if value not in allowed:
        logger.warning("Invalid %s %r, falling back to %r", name, value, default)
        return default
    return value


def _max_branches(raw: Optional[str]) -> int:
    if raw is None or raw.strip() == "":
        return DEFAULT_MAX_BRANCHES
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"MAX_BRANCHES must be an integer, got {raw!r}") from e
    if value < 1:
        raise ConfigError(f"MAX_BRANCHES must be at least 1, got {value}")
    return value


def load_config(args: Any = None, environ: Optional[Mapping[str, str]] = None,
                today: Optional[datetime.date] = None) -> AppConfig:
    """
    Build the application configuration.

    Args:
        args: Parsed CLI namespace (``date``, ``outputFormat``, ``noFiles``,
              ``output``); any missing attribute is treated as not given
        environ: Environment mapping to read options from
        today: Override for the current date

    Returns:
        Frozen AppConfig with normalized repository names

    Raises:
        ConfigError: If GITHUB_TOKEN is missing, repo names cannot be
                     normalized, or MAX_BRANCHES is invalid
    """
    env = environ if environ is not None else {}
    today = today or datetime.date.today()

    token = env.get("GITHUB_TOKEN")
    if not token:
        raise ConfigError("GITHUB_TOKEN is required")

    organization = env.get("GITHUB_ORG") or None
    target_repos = normalize_repos(_split_list(env.get("TARGET_REPOS")), organization)
    debug = _flag(env.get("DEBUG"))

    cli_no_files = getattr(args, "noFiles", None)
    no_files = bool(cli_no_files) if cli_no_files else _flag(env.get("NO_FILES"))

    output_format = _choice(
        getattr(args, "outputFormat", None) or env.get("OUTPUT_FORMAT"),
        OUTPUT_FORMATS, "simple", "output format",
    )
    output = _choice(getattr(args, "output", None), FILE_FORMATS, "txt", "file format")

    day = _resolve_date(getattr(args, "date", None), env.get("TARGET_DATE"), today)
    if debug:
        logger.debug("Using report date %s", day.isoformat())

    return AppConfig(
        token=token,
        date=day,
        target_users=_split_list(env.get("TARGET_USERS")),
        target_repos=target_repos,
        organization=organization,
        debug=debug,
        check_previous_day=_flag(env.get("CHECK_PREVIOUS_DAY")),
        output_format=output_format,
        no_files=no_files,
        output_dir=env.get("OUTPUT_DIR") or DEFAULT_OUTPUT_DIR,
        output=output,
        max_branches=_max_branches(env.get("MAX_BRANCHES")),
    )


def load_notifier_config(environ: Mapping[str, str]) -> NotifierConfig:
    """Load the messaging transport settings. All four values are required."""
    names = ("TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_WHATSAPP_FROM", "WHATSAPP_TO")
    missing = [n for n in names if not environ.get(n)]
    if missing:
        raise ConfigError(f"Missing notifier configuration: {', '.join(missing)}")
    return NotifierConfig(
        account_sid=environ["TWILIO_ACCOUNT_SID"],
        auth_token=environ["TWILIO_AUTH_TOKEN"],
        from_number=environ["TWILIO_WHATSAPP_FROM"],
        to_number=environ["WHATSAPP_TO"],
        debug=_flag(environ.get("DEBUG")),
    )
