"""Pytest configuration and shared fixtures."""

import pytest

from courier_engine.domain.entities.carrier import Carrier

TENANT = "store-1"
LOCAL = "zone-local"
REMOTE_B = "zone-remote-b"


@pytest.fixture
def carrier_x():
    return Carrier(
        id="c-x", tenant_id=TENANT, name="Xpress", code="xp", supports_cod=True,
        max_weight_kg=30, serviceable_zone_ids=frozenset({LOCAL}), priority=5,
    )


@pytest.fixture
def carrier_y():
    return Carrier(
        id="c-y", tenant_id=TENANT, name="Yodel", code="YDL", supports_cod=True,
        max_weight_kg=50, serviceable_zone_ids=frozenset({LOCAL}), priority=1,
    )


@pytest.fixture
def carrier_z():
    return Carrier(
        id="c-z", tenant_id=TENANT, name="Zoom Premium", code="ZOOM", supports_cod=False,
        max_weight_kg=0, serviceable_zone_ids=frozenset({LOCAL}), priority=3,
    )


@pytest.fixture
def carrier_d():
    return Carrier(
        id="c-d", tenant_id=TENANT, name="Default Post", code="DPOST", supports_cod=True,
        max_weight_kg=0, serviceable_zone_ids=frozenset({LOCAL, REMOTE_B}), priority=1,
    )
