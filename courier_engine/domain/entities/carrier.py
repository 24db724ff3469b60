"""Carrier entity — a tenant-scoped shipping provider."""

from dataclasses import dataclass, field


@dataclass
class Carrier:
    id: str
    tenant_id: str
    name: str
    code: str
    supports_cod: bool = False
    max_weight_kg: float = 0.0  # 0 = unlimited
    serviceable_zone_ids: frozenset[str] = field(default_factory=frozenset)
    # Empty = no pincode restriction beyond the zone list
    serviceable_pincodes: frozenset[str] = field(default_factory=frozenset)
    priority: int = 999
    is_active: bool = True

    def __post_init__(self) -> None:
        self.code = self.code.strip().upper()
        self.serviceable_zone_ids = frozenset(self.serviceable_zone_ids)
        self.serviceable_pincodes = frozenset(self.serviceable_pincodes)

    def services_zone(self, zone_id: str) -> bool:
        return zone_id in self.serviceable_zone_ids

    def has_pincode_restriction(self) -> bool:
        return bool(self.serviceable_pincodes)
