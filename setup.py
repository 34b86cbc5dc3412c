import os

from setuptools import setup, find_packages


def _read_file(path: str) -> str:
    with open(path) as f:
        return f.read().strip()


# Versions
file_dir = os.path.dirname(os.path.realpath(__file__))
lottery_version = _read_file(os.path.join(file_dir, 'lottery', 'VERSION'))
packages = find_packages(include=['lottery', 'lottery.*'])


setup(
    # Metadata
    name='lottery',
    version=lottery_version,
    license='MIT',
    description='Harness for a manager-run Ethereum lottery contract: compiles, deploys and drives Lottery.sol through '
                'web3 backends or an in-process simulation, and ships conformance scenarios for it.',

    # Dependencies
    python_requires='>=3.8,<4',
    install_requires=[
        'web3[tester]>=6,<7',
        'py-solc-x>=1.1,<2',
        'pycryptodome>=3.9,<4',
        'appdirs>=1.4,<1.5',
        'argcomplete>=1,<4',
        'semantic-version>=2.8.4,<3',
    ],
    extras_require={
        'test': [
            'parameterized>=0.8',
            'pytest',
        ],
    },

    # Contents
    packages=packages,
    package_data={'lottery': ['VERSION', 'contracts/*.sol']},
    entry_points={
        "console_scripts": [
            "lottery=lottery.__main__:main"
        ]
    }
)
