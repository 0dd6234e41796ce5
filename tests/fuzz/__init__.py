"""Fuzz testing infrastructure for phaserlock.

This package contains:
- test_classifier_fuzz: Larger random snapshots and adversarial shapes

All tests here are fuzz-marked and skipped unless run with ``-m fuzz``.

Python 3.13+.
"""
