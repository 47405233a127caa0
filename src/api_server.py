import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from hypixel import INVENTORY_SECTIONS, HypixelAPIError, ProfileNotFoundError
from inventory_service import InventoryNotFoundError, InventoryService
from item_parser import InventoryFormatError
from NBT_Decoder import NBTDecodeError

logger = logging.getLogger(__name__)

app = FastAPI()


class CacheRequest(BaseModel):
    ttl: Optional[float] = None


def error_response(message: str, status: int) -> JSONResponse:
    return JSONResponse(status_code=status, content={"success": False, "error": message})


def _service(request: Request) -> InventoryService:
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise RuntimeError("Inventory service not configured")
    return service


@app.exception_handler(ProfileNotFoundError)
@app.exception_handler(InventoryNotFoundError)
async def _not_found(request: Request, exc: LookupError):
    return error_response(str(exc), 400)


@app.exception_handler(HypixelAPIError)
@app.exception_handler(NBTDecodeError)
@app.exception_handler(InventoryFormatError)
@app.exception_handler(SQLAlchemyError)
async def _internal_error(request: Request, exc: Exception):
    logger.error("[API] %s %s failed: %s", request.method, request.url.path, exc)
    return error_response(f"Internal server error: {exc}", 500)


@app.exception_handler(Exception)
async def _unhandled_error(request: Request, exc: Exception):
    logger.exception("[API] %s %s crashed", request.method, request.url.path)
    return error_response(f"Internal server error: {exc}", 500)


@app.on_event("startup")
async def _on_startup():
    logger.info("[API] Server started")


@app.on_event("shutdown")
async def _on_shutdown():
    service = getattr(app.state, "service", None)
    if service is not None:
        await service.client.close()
        service.cache.close()


@app.get("/api/{player}/{profile}/{section}")
async def api_inventory(player: str, profile: str, section: str, request: Request):
    if section not in INVENTORY_SECTIONS:
        return error_response(f"Unknown inventory section {section}", 404)

    result = await _service(request).get_inventory(player, profile, section)
    return JSONResponse(content=result.to_dict())


@app.post("/api/{player}/{profile}/cache")
async def api_cache(player: str, profile: str, request: Request, body: Optional[CacheRequest] = None):
    ttl = body.ttl if body else None
    await _service(request).refresh(player, profile, ttl)
    return JSONResponse(content={"success": True})
