"""
Tests for the 2D finite volume flux package.

Run tests with pytest:
    pytest fvflux/tests/ -v

Or run individual test files:
    pytest fvflux/tests/test_flux_schemes.py -v
    pytest fvflux/tests/test_integrator.py -v
"""
