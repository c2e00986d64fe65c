import tomllib
from dataclasses import dataclass
from pathlib import Path

import tomlkit

CONFIG_FILE = Path(".ship") / "config.toml"


@dataclass(frozen=True)
class ShipConfig:
    """In-memory representation of `.ship/config.toml`."""

    trunk_branch: str = "main"
    trunk_remote: str = "origin"
    workspace_base_path: str = ".ship/workspaces/{stack}"
    auto_cleanup: bool = True
    pr_draft: bool = False


# dotted key -> (section, key, type)
CONFIG_KEYS: dict[str, tuple[str, str, type]] = {
    "trunk.branch": ("trunk", "branch", str),
    "trunk.remote": ("trunk", "remote", str),
    "workspace.base_path": ("workspace", "base_path", str),
    "workspace.auto_cleanup": ("workspace", "auto_cleanup", bool),
    "pr.draft": ("pr", "draft", bool),
}

_FIELD_FOR_KEY = {
    "trunk.branch": "trunk_branch",
    "trunk.remote": "trunk_remote",
    "workspace.base_path": "workspace_base_path",
    "workspace.auto_cleanup": "auto_cleanup",
    "pr.draft": "pr_draft",
}


class ConfigKeyError(ValueError):
    """Unknown config key or a value that does not fit the key's type."""


def load_config(repo_root: Path) -> ShipConfig:
    """Load `.ship/config.toml` under repo_root if present; otherwise return defaults.

    Example config:
      [trunk]
      branch = "main"
      remote = "origin"

      [workspace]
      base_path = "../{repo}-{stack}"
      auto_cleanup = true

      [pr]
      draft = false
    """
    cfg_path = repo_root / CONFIG_FILE
    if not cfg_path.exists():
        return ShipConfig()

    data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    defaults = ShipConfig()
    trunk = data.get("trunk", {})
    workspace = data.get("workspace", {})
    pr = data.get("pr", {})
    return ShipConfig(
        trunk_branch=str(trunk.get("branch", defaults.trunk_branch)),
        trunk_remote=str(trunk.get("remote", defaults.trunk_remote)),
        workspace_base_path=str(workspace.get("base_path", defaults.workspace_base_path)),
        auto_cleanup=bool(workspace.get("auto_cleanup", defaults.auto_cleanup)),
        pr_draft=bool(pr.get("draft", defaults.pr_draft)),
    )


def get_config_value(config: ShipConfig, key: str) -> str | bool:
    """Return the value of a dotted config key such as `trunk.branch`."""
    if key not in _FIELD_FOR_KEY:
        raise ConfigKeyError(f"Unknown config key: {key}")
    return getattr(config, _FIELD_FOR_KEY[key])


def parse_config_value(key: str, raw: str) -> str | bool:
    """Convert a command-line string into the type expected for key."""
    if key not in CONFIG_KEYS:
        raise ConfigKeyError(f"Unknown config key: {key}")
    _, _, value_type = CONFIG_KEYS[key]
    if value_type is bool:
        lowered = raw.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off"):
            return False
        raise ConfigKeyError(f"Invalid boolean value for {key}: {raw}")
    return raw


def set_config_value(repo_root: Path, key: str, raw: str) -> None:
    """Update one key in `.ship/config.toml`, preserving formatting.

    Creates the file (and `.ship/`) if it doesn't exist. Uses tomlkit so
    comments and unrelated sections survive the rewrite.
    """
    value = parse_config_value(key, raw)
    section, name, _ = CONFIG_KEYS[key]

    cfg_path = repo_root / CONFIG_FILE
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    if cfg_path.exists():
        doc = tomlkit.parse(cfg_path.read_text(encoding="utf-8"))
    else:
        doc = tomlkit.document()

    if section not in doc:
        doc[section] = tomlkit.table()
    doc[section][name] = value  # type: ignore[index]

    cfg_path.write_text(tomlkit.dumps(doc), encoding="utf-8")


def resolve_workspace_path(config: ShipConfig, repo_root: Path, stack: str, user: str) -> Path:
    """Expand `workspace.base_path` for a new workspace.

    Placeholders: {repo} (repo directory name), {stack} (workspace name),
    {user}. Relative results are anchored at repo_root.
    """
    expanded = config.workspace_base_path.format(repo=repo_root.name, stack=stack, user=user)
    path = Path(expanded).expanduser()
    if not path.is_absolute():
        path = repo_root / path
    return path
