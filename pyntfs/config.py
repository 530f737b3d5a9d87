"""Run configuration for one sandbox volume."""
import json
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

DEFAULT_EPOCH = 1234567890000
DEFAULT_USER = "admin"


def default_environment(username:str=DEFAULT_USER) -> Dict[str, str]:
    profile = "C:\\Users\\" + username
    return {
        "allusersprofile": "C:\\ProgramData",
        "appdata": profile + "\\AppData\\Roaming",
        "comspec": "C:\\Windows\\System32\\cmd.exe",
        "homedrive": "C:",
        "homepath": "\\Users\\" + username,
        "localappdata": profile + "\\AppData\\Local",
        "path": profile + "\\Desktop",
        "programdata": "C:\\ProgramData",
        "programfiles": "C:\\Program Files",
        "public": "C:\\Users\\Public",
        "systemdrive": "C:",
        "systemroot": "C:\\Windows",
        "temp": profile + "\\AppData\\Local\\Temp",
        "tmp": profile + "\\AppData\\Local\\Temp",
        "username": username,
        "userprofile": profile,
        "windir": "C:\\Windows",
    }


def default_folders(username:str=DEFAULT_USER) -> List[str]:
    profile = "C:\\Users\\" + username
    return [
        "C:\\Windows\\System32",
        "C:\\Program Files",
        "C:\\ProgramData",
        "C:\\Users\\Public",
        profile + "\\Desktop",
        profile + "\\AppData\\Roaming",
        profile + "\\AppData\\Local\\Temp",
    ]


@dataclass
class VFSConfig:
    autovivify: bool = True
    epoch: int = DEFAULT_EPOCH
    encoding: str = "utf-8"
    username: str = DEFAULT_USER
    environment: Dict[str, str] = field(default_factory=default_environment)
    default_folders: List[str] = field(default_factory=default_folders)
    seed_path: Optional[str] = None

    def __post_init__(self):
        # environment names are case-insensitive on Windows
        self.environment = {k.lower(): v for k, v in self.environment.items()}

    def get_env(self, name:str) -> Optional[str]:
        return self.environment.get(name.lower())

    def set_env(self, name:str, value:str):
        self.environment[name.lower()] = value

    @classmethod
    def from_dict(cls, data:Dict[str, Any]) -> "VFSConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError("unknown configuration keys: %s" % ", ".join(sorted(unknown)))
        kwargs = dict(data)
        username = kwargs.get("username", DEFAULT_USER)
        if "username" in kwargs:
            kwargs.setdefault("default_folders", default_folders(username))
        env = default_environment(username)
        env.update({k.lower(): v for k, v in kwargs.get("environment", {}).items()})
        kwargs["environment"] = env
        return cls(**kwargs)

    @classmethod
    def from_json(cls, path:str) -> "VFSConfig":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
