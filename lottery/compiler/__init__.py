"""
This package contains the compilation functionality.

===========
Subpackages
===========
* :py:mod:`.solidity`: Wrapper around the solc standard json interface
"""
