"""
This package defines the exceptions which may be publicly raised by the lottery harness.

==========
Submodules
==========
* :py:mod:`.exceptions`: Exception hierarchy for rejected lottery calls
"""
