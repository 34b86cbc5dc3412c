"""
This package contains the declarative transaction scenarios used to check Lottery deployments.

==========
Submodules
==========
* :py:mod:`.scenario`: Scenario, assertion and builder classes
* :py:mod:`.scenarios`: The bundled conformance scenarios
"""
