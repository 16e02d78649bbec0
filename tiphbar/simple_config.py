from __future__ import annotations
from copy import deepcopy
import json
import os
import stat
import threading
from typing import Any, Callable, cast, Type, TypeVar

from mypy_extensions import DefaultArg

from .constants import APP_DESCRIPTION, APP_ICON_URL, APP_NAME, DEFAULT_EXTENSION_TIMEOUT, \
    DEFAULT_IDENTITY_SERVICE_TIMEOUT, DEFAULT_MIRROR_NODE_TIMEOUT, DEFAULT_TIP_MEMO
from .logs import logs
from .networks import HederaMainnet, NETWORKS_BY_NAME
from .platform import platform
from .types import AppMetadata
from .util import make_dir


logger = logs.get_logger("config")


FINAL_CONFIG_VERSION = 1

T = TypeVar('T')


class SimpleConfig:
    """
    The SimpleConfig class is responsible for handling operations involving
    configuration files.

    There are two different sources of possible configuration values:
        1. Command line options.
        2. User configuration (in the user's config directory)
    They are taken in order (1. overrides config options set in 2.)
    """

    def __init__(self, options: dict[str, Any]|None=None,
            read_user_config_function: Callable[[str], dict[str, Any]]|None=None,
            read_user_dir_function: Callable[[DefaultArg(bool, 'prefer_local')], str]|None=None) \
                -> None:

        if options is None:
            options = {}

        # This lock needs to be acquired for updating and reading the config in
        # a thread-safe way.
        self.lock = threading.RLock()

        # The following two functions are there for dependency injection when
        # testing.
        if read_user_config_function is None:
            read_user_config_function = read_user_config
        if read_user_dir_function is None:
            self.user_dir = platform.user_dir
        else:
            self.user_dir = read_user_dir_function

        # The command line options
        self.cmdline_options = deepcopy(options)
        # don't allow to be set on CLI:
        self.cmdline_options.pop('config_version', None)

        # Set self.path and read the user config
        self.user_config: dict[str, Any] = {}  # for self.get in data_path()
        self.path = self.data_path()
        self.user_config = read_user_config_function(self.path)
        if not self.user_config:
            self.user_config = {'config_version': FINAL_CONFIG_VERSION}

        config_version = self.get_explicit_type(int, 'config_version', FINAL_CONFIG_VERSION)
        if config_version > FINAL_CONFIG_VERSION:
            logger.warning('WARNING: config version (%s) is higher than ours (%s)',
                             config_version, FINAL_CONFIG_VERSION)

    def data_path(self) -> str:
        # Read tiphbar_path from command line
        # Otherwise use the user's default data directory.
        path = cast(str, self.get('tiphbar_path'))
        if path is None:
            path = self.user_dir()

        make_dir(path)
        network_name = self.get_network_name()
        if network_name != HederaMainnet.NAME:
            path = os.path.join(path, network_name)
            make_dir(path)

        logger.debug("tiphbar directory '%s'", path)
        return os.path.abspath(path)

    def file_path(self, file_name: str) -> str|None:
        if self.path:
            return os.path.join(self.path, file_name)
        return None

    def set_key(self, key: str, value: Any, save: bool=True) -> None:
        if not self.is_modifiable(key):
            logger.warning("Not changing config key '%s' set on the command line", key)
            return
        self._set_key_in_user_config(key, value, save)

    def _set_key_in_user_config(self, key: str, value: Any, save: bool=True) -> None:
        with self.lock:
            if value is not None:
                self.user_config[key] = value
            else:
                self.user_config.pop(key, None)
            if save:
                self.save_user_config()

    def get(self, key: str, default: Any=None) -> Any|None:
        with self.lock:
            out = self.cmdline_options.get(key)
            if out is None:
                out = self.user_config.get(key, default)
        return out

    def get_optional_type(self, return_type: Type[T], key: str, default: T|None=None) -> T|None:
        with self.lock:
            value = self.cmdline_options.get(key)
            if value is None:
                value = self.user_config.get(key, default)
        assert value == default or isinstance(value, return_type)
        return cast(T, value)

    def get_explicit_type(self, return_type: Type[T], key: str, default: T) -> T:
        with self.lock:
            value: T|None = self.cmdline_options.get(key)
            if value is None:
                value = cast(T, self.user_config.get(key, default))
        assert isinstance(value, return_type)
        return value

    def is_modifiable(self, key: str) -> bool:
        return key not in self.cmdline_options

    def save_user_config(self) -> None:
        if not self.path:
            return
        path = os.path.join(self.path, "config")
        s = json.dumps(self.user_config, indent=4, sort_keys=True)
        with open(path, "w", encoding='utf-8') as f:
            f.write(s)
        os.chmod(path, stat.S_IREAD | stat.S_IWRITE)

    def get_network_name(self) -> str:
        return self.get_explicit_type(str, 'network', HederaMainnet.NAME)

    def get_mirror_node_url(self) -> str:
        """
        The base URL of the mirror node REST API, always ending in a slash so that resource
        paths can be appended directly.
        """
        url = self.get_optional_type(str, 'mirror_node_url')
        if not url:
            network = NETWORKS_BY_NAME.get(self.get_network_name(), HederaMainnet)
            url = cast(str, network.MIRROR_NODE_URL)
        if not url.endswith("/"):
            url += "/"
        return url

    def _get_seconds(self, key: str, default: float) -> float:
        value = self.get(key, default)
        assert isinstance(value, (int, float)) and not isinstance(value, bool), \
            f"config key '{key}' is not a number"
        if value <= 0:
            logger.warning("Ignoring non-positive '%s' value %s", key, value)
            return default
        return float(value)

    def get_mirror_node_timeout(self) -> float:
        return self._get_seconds('mirror_node_timeout', DEFAULT_MIRROR_NODE_TIMEOUT)

    def get_extension_timeout(self) -> float:
        return self._get_seconds('extension_timeout', DEFAULT_EXTENSION_TIMEOUT)

    def get_identity_service_timeout(self) -> float:
        return self._get_seconds('identity_service_timeout', DEFAULT_IDENTITY_SERVICE_TIMEOUT)

    def get_supabase_url(self) -> str|None:
        url = self.get_optional_type(str, 'supabase_url')
        if url:
            return url.rstrip("/")
        return None

    def get_supabase_api_key(self) -> str|None:
        return self.get_optional_type(str, 'supabase_api_key')

    def get_default_memo(self) -> str:
        return self.get_explicit_type(str, 'default_memo', DEFAULT_TIP_MEMO)

    def get_app_metadata(self) -> AppMetadata:
        return AppMetadata(
            name=self.get_explicit_type(str, 'app_name', APP_NAME),
            description=self.get_explicit_type(str, 'app_description', APP_DESCRIPTION),
            icon=self.get_explicit_type(str, 'app_icon', APP_ICON_URL))


def read_user_config(path: str) -> dict[str, Any]:
    """Parse and return the user config settings as a dictionary."""
    if not path:
        return {}
    config_path = os.path.join(path, "config")
    if not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, "r", encoding='utf-8') as f:
            data = f.read()
        result = json.loads(data)
    except Exception:
        logger.exception("Cannot read config file %s.", config_path)
        return {}
    if not type(result) is dict:
        return {}
    return result
