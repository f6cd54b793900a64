"""
Claim Player Rewards Test Suite
===============================

Test Organization
-----------------
- tests/unit/          : Fast isolated tests (tmp_path files, mocks)
- tests/integration/   : Restart and startup flows across real files

Use the `unit` / `integration` markers to select a subset.
"""
