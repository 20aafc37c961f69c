"""BDD tests for speed record features."""

import pytest
from pytest_bdd import scenarios

scenarios("speed_records.feature")

pytestmark = [
    pytest.mark.core,
    pytest.mark.tier(0),
    pytest.mark.tra("Core.SpeedRecord.Scenarios"),
]
