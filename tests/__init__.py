"""
Test suite for PyPrecipField package.

This test suite covers:
- Import tests for all modules and submodules
- Unit tests for projection, distance, blending, colour mapping and rendering
- Integration tests for complete render workflows
- Taichi and GL backend tests (skipped when unavailable)

Run with: pytest
"""
