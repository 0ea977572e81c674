"""Assets router."""

from fastapi import APIRouter, Depends

from hrms.assets.schemas import AssetAssignRequest, AssetCreateRequest, AssetOut
from hrms.assets.service import AssetService
from hrms.auth.dependencies import get_caller, get_store
from hrms.auth.schemas import CallerContext
from hrms.common.results import ActionResult, settle
from hrms.store.service import TabularStore

router = APIRouter(prefix="", tags=["assets"])


@router.get("", response_model=list[AssetOut])
async def list_assets(
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await AssetService.list_assets(store, caller)


@router.post("", response_model=ActionResult, status_code=201)
async def create_asset(
    body: AssetCreateRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    result = await AssetService.create(
        store, caller, body.asset_type, body.model, body.serial_no,
    )
    return await settle(store, result)


@router.post("/assign", response_model=ActionResult)
async def assign_asset(
    body: AssetAssignRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    result = await AssetService.assign(store, caller, body.asset_id, body.emp_id)
    return await settle(store, result)
