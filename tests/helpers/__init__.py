"""Test helper modules for the combo-skills test suite.

- builders: definition builders and definition-file writers
- fakes: fake registry lookups and synthesizers implementing the protocols
- cache_utils: cache and logging reset for test isolation
"""
from __future__ import annotations
