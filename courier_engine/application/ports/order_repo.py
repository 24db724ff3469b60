"""Port interface for the order lifecycle collaborator."""

from abc import ABC, abstractmethod

from courier_engine.domain.entities.order_courier import OrderCourierState
from courier_engine.domain.entities.snapshot import CourierSnapshot
from courier_engine.domain.value_objects.enums import OrderStatus


class OrderRepository(ABC):
    @abstractmethod
    async def get_courier_state(self, tenant_id: str, order_id: str) -> OrderCourierState | None:
        ...

    @abstractmethod
    async def compare_and_swap_snapshot(
        self,
        order_id: str,
        expected_status: OrderStatus,
        expected_version: int,
        snapshot: CourierSnapshot,
    ) -> bool:
        """Replace the snapshot only if status and version are unchanged.

        Must be a single atomic conditional write. Returns False when the
        order moved on in the meantime (nothing is written in that case).
        """
        ...

    @abstractmethod
    async def attach_initial_snapshot(
        self,
        order_id: str,
        expected_status: OrderStatus,
        expected_version: int,
        snapshot: CourierSnapshot,
    ) -> bool:
        """Store the first snapshot; only writes while the order has none.

        Returns False when another assignment got there first.
        """
        ...
