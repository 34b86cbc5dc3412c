import json
import os
from typing import Dict, Any

from lottery.config_user import UserConfig
from lottery.config_version import Versions


def lt_print(*args, verbosity_level=1, **kwargs):
    if (verbosity_level <= cfg.verbosity) and not cfg.is_unit_test:
        print(*args, **kwargs)


def lt_print_banner(title: str):
    l = len(title) + 4
    lt_print(f'{"#"*l}\n# {title} #\n{"#"*l}\n')


class Config(UserConfig):
    def __init__(self):
        super().__init__()

        # Internal values

        self._is_unit_test = False

    def _load_cfg_file_if_exists(self, filename):
        if os.path.exists(filename):
            with open(filename) as conf:
                try:
                    self.override_defaults(json.load(conf))
                except ValueError as e:
                    raise ValueError(f'{e} (in file "{filename}")')

    def load_configuration_from_disk(self, local_cfg_file: str):
        # Load global configuration file
        global_config_dir = self._appdirs.site_config_dir
        global_cfg_file = os.path.join(global_config_dir, 'config.json')
        self._load_cfg_file_if_exists(global_cfg_file)

        # Load user configuration file
        user_config_dir = self._appdirs.user_config_dir
        user_cfg_file = os.path.join(user_config_dir, 'config.json')
        self._load_cfg_file_if_exists(user_cfg_file)

        # Load local configuration file
        self._load_cfg_file_if_exists(local_cfg_file)

    def override_defaults(self, overrides: Dict[str, Any]):
        for arg, val in overrides.items():
            if not hasattr(self, arg):
                raise ValueError(f'Tried to override non-existing config value {arg}')
            try:
                setattr(self, arg, val)
            except ValueError as e:
                raise ValueError(f'{e} (for entry "{arg}")')

    @property
    def lottery_version(self) -> str:
        """lottery harness version number"""
        return Versions.LOTTERY_VERSION

    @property
    def solc_version(self) -> str:
        if Versions.SOLC_VERSION is None:
            Versions.set_solc_version(Versions.LOTTERY_DEFAULT_SOLC_VERSION)
        return Versions.SOLC_VERSION

    @staticmethod
    def override_solc(new_version):
        Versions.set_solc_version(new_version)

    @property
    def contract_name(self) -> str:
        return 'Lottery'

    @property
    def contract_filename(self) -> str:
        return f'{self.contract_name}.sol'

    @property
    def is_unit_test(self) -> bool:
        return self._is_unit_test

    @is_unit_test.setter
    def is_unit_test(self, val: bool):
        self._is_unit_test = val


cfg = Config()
