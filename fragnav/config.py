# fragnav/config.py
from __future__ import annotations
import importlib
import logging
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

logger = logging.getLogger(__name__)

# --- Navigation defaults (overridable per call and from config.yaml) ---
DEFAULT_WAIT_MS = 300
DEFAULT_STYLE_RULES = "flex: 1; border: none; overflow-y: auto; overflow-x: hidden;"
DEFAULT_FETCH_TIMEOUT = 10.0
DEFAULT_SERVER_PORT = 8000


class Config:
    """
    Singleton config loader that supports:
      - an embedded config module (default name: _embedded_config, attribute: CONFIG)
      - a fallback YAML file (config.yaml)

    Usage:
        cfg = Config()  # prefers embedded if available, else loads config.yaml
        wait = cfg.get_nested("navigation.wait_ms", DEFAULT_WAIT_MS)
        cfg.reload()    # re-read embedded/file (useful in dev)

    Parameters:
      config_file: path to YAML config (relative or absolute). Attempts sensible fallbacks.
      prefer_embedded: when True (default) try embedded module first, otherwise check file first.
      embedded_module_name: module name to import when looking for embedded config.
    """

    _instance: Optional["Config"] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
        return cls._instance

    def __init__(
        self,
        config_file: str = "config.yaml",
        prefer_embedded: bool = True,
        embedded_module_name: str = "_embedded_config",
    ):
        # initialize only once
        if getattr(self, "_initialized", False):
            return

        self._initialized = True
        self.config_file_arg = config_file
        self.prefer_embedded = bool(prefer_embedded)
        self.embedded_module_name = embedded_module_name

        self._config: Dict[str, Any] = {}
        self._source: Optional[str] = None  # 'embedded' or 'file' or None

        self._resolved_config_path: Optional[Path] = self._resolve_config_path(str(config_file))
        self.reload()

    @classmethod
    def reset(cls) -> None:
        """Drops the shared instance so the next Config() starts from scratch."""
        cls._instance = None

    # ----- public API -----
    def reload(self, prefer_embedded: Optional[bool] = None) -> None:
        """
        Reload the configuration. If prefer_embedded is provided, it overrides the instance preference
        just for this reload.
        """
        prefer = self.prefer_embedded if prefer_embedded is None else bool(prefer_embedded)

        if prefer:
            loaded = self._try_load_embedded() or self._try_load_file()
        else:
            loaded = self._try_load_file() or self._try_load_embedded()

        if not loaded:
            self._source = None
            self._config = {}

    def as_dict(self) -> Dict[str, Any]:
        """Return the loaded configuration as a dict (may be empty)."""
        return dict(self._config)

    def get(self, key: str, default: Any = None) -> Any:
        """Shallow lookup in the top-level config dict."""
        return self._config.get(key, default)

    def get_nested(self, path: str, default: Any = None, sep: str = ".") -> Any:
        """
        Lookup nested keys using dot-path (e.g. "navigation.wait_ms").
        Returns default if any step is missing.
        """
        cur = self._config
        if not path:
            return default
        for part in path.split(sep):
            if not isinstance(cur, dict) or part not in cur:
                return default
            cur = cur[part]
        return cur

    @property
    def source(self) -> Optional[str]:
        """Return 'embedded'|'file'|None depending on where config came from."""
        return self._source

    @property
    def resolved_config_path(self) -> Optional[Path]:
        return self._resolved_config_path

    # ----- navigation shortcuts -----
    @property
    def wait_ms(self) -> int:
        return int(self.get_nested("navigation.wait_ms", DEFAULT_WAIT_MS))

    @property
    def style_rules(self) -> str:
        return str(self.get_nested("navigation.style_rules", DEFAULT_STYLE_RULES))

    @property
    def fetch_timeout(self) -> float:
        return float(self.get_nested("fetch.timeout", DEFAULT_FETCH_TIMEOUT))

    @property
    def base_url(self) -> Optional[str]:
        return self.get_nested("fetch.base_url")

    # ----- internal helpers -----
    def _resolve_config_path(self, config_file: str) -> Optional[Path]:
        """
        Try to resolve the YAML config path:
          1. absolute and exists
          2. relative to the project root (parent of this package)
          3. relative to this package
          4. relative to cwd
        """
        candidate = Path(config_file)
        if candidate.is_absolute():
            return candidate.resolve() if candidate.exists() else None

        here = Path(__file__).resolve().parent
        for base in (here.parent, here, Path.cwd()):
            p = (base / config_file).resolve()
            if p.exists():
                return p
        return None

    def _try_load_embedded(self) -> bool:
        try:
            module = importlib.import_module(self.embedded_module_name)
        except ModuleNotFoundError:
            return False
        cfg = getattr(module, "CONFIG", None)
        if isinstance(cfg, dict):
            logger.debug("[Config] loaded embedded config from %s", module.__name__)
            self._config = dict(cfg)
            self._source = "embedded"
            return True
        return False

    def _try_load_file(self) -> bool:
        if not self._resolved_config_path:
            return False
        try:
            with self._resolved_config_path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("⚠️ [Config] could not read %s: %s", self._resolved_config_path, e)
            return False
        if data is None:
            data = {}
        if isinstance(data, dict):
            self._config = data
        else:
            # YAML parsed but not dict -> store raw under a key
            self._config = {"__root__": data}
        self._source = "file"
        logger.debug("[Config] loaded %s", self._resolved_config_path)
        return True


def get_config(*args, **kwargs) -> Config:
    """
    Convenience factory that returns the singleton Config instance.
    Arguments forwarded to Config() only on the first call.
    """
    return Config(*args, **kwargs)
