"""
This module defines pinned versions and is used internally to configure the concrete solc version to use
"""
import os

from semantic_version import NpmSpec, Version


class Versions:
    LOTTERY_SOLC_VERSION_COMPATIBILITY = NpmSpec('^0.6.0')
    LOTTERY_DEFAULT_SOLC_VERSION = '0.6.12'
    SOLC_VERSION = None

    # Read harness version from VERSION file
    with open(os.path.join(os.path.realpath(os.path.dirname(__file__)), 'VERSION')) as f:
        LOTTERY_VERSION = f.read().strip()

    @staticmethod
    def set_solc_version(version: str):
        """
        Select the solc binary used for all compilations, installing it through py-solc-x if necessary.

        :param version: concrete version string (optionally prefixed with 'v') or 'latest' for the newest
                        installed compiler satisfying the supported language level
        :raise ValueError: if the version string is malformed or outside the supported language level
        """
        version = version[1:] if version.startswith('v') else version

        import solcx
        from solcx.exceptions import SolcNotInstalled
        if version == 'latest':
            installed = [Version(str(v)) for v in solcx.get_installed_solc_versions()]
            compatible = [v for v in installed if Versions.LOTTERY_SOLC_VERSION_COMPATIBILITY.match(v)]
            version = str(max(compatible)) if compatible else Versions.LOTTERY_DEFAULT_SOLC_VERSION

        try:
            v = Version(version)
        except ValueError as e:
            raise ValueError(f'Invalid version string {version}\n{e}')
        if not Versions.LOTTERY_SOLC_VERSION_COMPATIBILITY.match(v):
            raise ValueError(f'Only solc versions satisfying {Versions.LOTTERY_SOLC_VERSION_COMPATIBILITY.expression} are supported')

        try:
            solcx.set_solc_version(version, silent=True)
        except SolcNotInstalled:
            solcx.install_solc(version)
            solcx.set_solc_version(version, silent=True)

        Versions.SOLC_VERSION = f'v{v}'
