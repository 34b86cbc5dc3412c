"""
The main lottery harness package.

==========
Submodules
==========
* :py:mod:`.__main__`: Command line interface
* :py:mod:`.config`: Global configuration (both user-configuration as well as internal configuration)
* :py:mod:`.state`: In-process model of the Lottery state machine

===========
Subpackages
===========
* :py:mod:`.compiler`: Solidity compilation functionality
* :py:mod:`.contracts`: Solidity source of the Lottery contract
* :py:mod:`.errors`: Defines exceptions which may be raised by public interfaces
* :py:mod:`.examples`: Conformance scenarios
* :py:mod:`.my_logging`: Logging facilities
* :py:mod:`.transaction`: Runtime API (blockchain backends and contract handles)
* :py:mod:`.utils`: Internal helper functionality
"""
