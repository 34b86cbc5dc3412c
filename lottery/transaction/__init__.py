"""
This package contains the runtime API used to deploy and drive Lottery contracts.

==========
Submodules
==========
* :py:mod:`.interface`: Blockchain API interface
* :py:mod:`.offchain`: Per-user contract handles (deploy, connect, enter, pick winner, ...)
* :py:mod:`.runtime`: Static class which provides access to the blockchain backend singleton.
* :py:mod:`.types`: Type wrapper classes (for safer API interactions) used by the Runtime API.

===========
Subpackages
===========
* :py:mod:`.blockchain`: Blockchain backends
"""
