"""
Settings bounds.
"""

import pytest
from pydantic import ValidationError

from reward_ledger.core.config import Settings


class TestSettings:
    def test_quantity_cap_cannot_exceed_table_limit(self):
        with pytest.raises(ValidationError):
            Settings(database_url="sqlite://", max_quantity_per_redemption=51)

    def test_quantity_cap_can_be_lowered(self):
        settings = Settings(database_url="sqlite://", max_quantity_per_redemption=10)
        assert settings.max_quantity_per_redemption == 10
