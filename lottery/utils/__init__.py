"""
This package contains helper functionality.

==========
Submodules
==========
* :py:mod:`.helpers`: Miscellaneous operations (file reading and writing, contract name extraction, ...)
* :py:mod:`.progress_printer`: Context managers for printing before and after context execution, and for colored terminal output.
* :py:mod:`.timer`: Context manager for measuring elapsed (wall clock) time
"""
