"""Low-level numerical helpers, coefficient tables and kernels.

This subpackage contains the exact coefficient tables, shared argument checks
and the Numba-accelerated array kernels used by the engines.
"""
