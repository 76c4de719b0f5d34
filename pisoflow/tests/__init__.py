"""
Tests for the 1D compressible PISO solver.

Run tests with pytest:
    pytest pisoflow/tests/ -v

Or run individual test files:
    pytest pisoflow/tests/test_piso.py -v
"""
