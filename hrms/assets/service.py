"""Asset service — register and assign company equipment."""

from __future__ import annotations

from hrms.auth.schemas import CallerContext
from hrms.auth.service import AccessService
from hrms.common.audit import record_action
from hrms.common.clock import generate_id
from hrms.common.constants import APPROVER_ROLES, AssetStatus, Table
from hrms.common.results import ActionResult
from hrms.store.service import Record, RowRef, TabularStore


class AssetService:
    """Async asset operations. Registration and assignment are ADMIN/HR only."""

    @staticmethod
    async def create(
        store: TabularStore,
        caller: CallerContext,
        asset_type: str,
        model: str,
        serial_no: str,
    ) -> ActionResult:
        if not (asset_type and model and serial_no):
            return ActionResult.fail("Please fill out all fields.")
        denied = await AccessService.require_roles(
            store, caller, APPROVER_ROLES, action="Asset Create",
        )
        if denied:
            return denied

        record = await store.append_row(
            Table.assets,
            [generate_id("ASSET"), asset_type, model, serial_no, None, AssetStatus.available.value],
        )
        await record_action(store, actor=caller.email, action="Asset Create", details=model)
        return ActionResult.ok("Asset Added", data=record)

    @staticmethod
    async def assign(
        store: TabularStore,
        caller: CallerContext,
        asset_id: str,
        emp_id: str,
    ) -> ActionResult:
        denied = await AccessService.require_roles(
            store, caller, APPROVER_ROLES, action="Asset Assign",
        )
        if denied:
            return denied

        asset = await store.find_one(Table.assets, asset_id=asset_id)
        if asset is None:
            return ActionResult.not_found("Asset not found")
        if asset["status"] != AssetStatus.available.value:
            return ActionResult.conflict("Asset is not available for assignment.")
        if await store.find_one(Table.employees, emp_id=emp_id) is None:
            return ActionResult.not_found("Employee not found")

        await store.update_cells(
            Table.assets,
            RowRef.of(asset),
            {"assigned_to": emp_id, "status": AssetStatus.assigned.value},
        )
        await record_action(
            store, actor=caller.email, action="Asset Assign", details=f"{asset_id} to {emp_id}",
        )
        return ActionResult.ok("Asset Assigned")

    @staticmethod
    async def list_assets(store: TabularStore, caller: CallerContext) -> list[Record]:
        """Everything for ADMIN/HR; otherwise the assets assigned to the caller."""
        if caller.is_approver:
            return await store.read_table(Table.assets)
        return await store.read_table(Table.assets, assigned_to=caller.emp_id)
