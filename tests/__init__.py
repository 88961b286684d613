"""Test suite for wxpaint.

Test Structure:
- unit/: Unit tests per package (api, caching, generation, artifacts, io,
  paintings, config, cli, utils)
- conftest.py: Shared fixtures (MockTransport-backed clients, fake storage)
"""
