########## ini_config.py

import os
from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path

INI_DEFAULT_NAME = "seo_insight.ini"


@dataclass(frozen=True)
class AppSettings:
    gemini_api_key: str
    gemini_model: str
    search_grounding: bool

    keyword_count: int

    default_scheme: str

    log_level: str

    flask_host: str
    flask_port: int
    flask_debug: bool


class IniConfig:
    """
    Adapter around ConfigParser.
    Keeps INI handling out of your app/service code.
    """

    def __init__(self, ini_path: Path):
        self._ini_path = ini_path
        self._cfg = ConfigParser()
        read_ok = self._cfg.read(str(ini_path), encoding="utf-8-sig")
        if not read_ok:
            raise FileNotFoundError(f"INI file not found or unreadable: {ini_path}")

    @staticmethod
    def from_env_or_default() -> "IniConfig":
        ini_raw = (os.getenv("APP_INI") or "").strip()
        # If APP_INI is not set, default to repo-root-relative ini location
        ini_path = Path(ini_raw) if ini_raw else (Path(__file__).resolve().parents[2] / INI_DEFAULT_NAME)
        return IniConfig(ini_path)

    def _api_key(self) -> str:
        """
        INI value wins; otherwise GEMINI_API_KEY, then API_KEY from the environment.
        An empty key is allowed here and fails at call time.
        """
        raw = (self._cfg.get("gemini", "api_key", fallback="") or "").strip()
        if raw:
            return os.path.expandvars(raw)
        return (os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or "").strip()

    def load_settings(self) -> AppSettings:
        # Model
        gemini_model = (self._cfg.get("gemini", "model", fallback="gemini-2.5-flash") or "").strip() or "gemini-2.5-flash"
        search_grounding = self._cfg.getboolean("gemini", "search_grounding", fallback=True)

        # Analysis
        keyword_count = self._cfg.getint("analysis", "keyword_count", fallback=20)

        # URL normalization
        default_scheme = (self._cfg.get("url_normalization", "default_scheme", fallback="https") or "").strip() or "https"

        # Logging
        log_level = (self._cfg.get("logging", "level", fallback="INFO") or "").strip().upper() or "INFO"

        # Flask
        flask_host = (self._cfg.get("flask", "host", fallback="127.0.0.1") or "").strip() or "127.0.0.1"
        flask_port = self._cfg.getint("flask", "port", fallback=5000)
        flask_debug = self._cfg.getboolean("flask", "debug", fallback=False)

        # Validate
        if keyword_count < 1:
            raise ValueError(f"analysis.keyword_count must be positive, got {keyword_count}")

        return AppSettings(
            gemini_api_key=self._api_key(),
            gemini_model=gemini_model,
            search_grounding=search_grounding,
            keyword_count=keyword_count,
            default_scheme=default_scheme,
            log_level=log_level,
            flask_host=flask_host,
            flask_port=flask_port,
            flask_debug=flask_debug,
        )
