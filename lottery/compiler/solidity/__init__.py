"""
This package contains the interface to the external solc compiler.

==========
Submodules
==========
* :py:mod:`.compiler`: Compile solidity files and report compiler errors
"""
