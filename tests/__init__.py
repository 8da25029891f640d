"""
Test suite for the benchmark table generator.

This package contains tests covering:
- Unit tests for decimal comparison, history lookup and configuration
- Loader and statistics tests on small hand-checked result files
- Integration tests for the report writer, the sweep and the command line
"""
