"""
Integration tests for covdist.

These tests verify that configuration, covariance binding and the batch
matrix builders work together.
"""

import pytest


# Integration test markers
integration = pytest.mark.integration
slow = pytest.mark.slow
