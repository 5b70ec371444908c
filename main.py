import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from statuspage import config, loader, updater, views
from statuspage.cache import cache_size, clear_cache
from statuspage.errors import DataIntegrityError, InvalidArgumentError, OrganizationNotFoundError, StatusPageError
from statuspage.logging_config import get_logger, setup_logging

# ==============================
# Config + Logging
# ==============================
setup_logging(debug=config.DEBUG)
logger = get_logger("statuspage.api")

SETTINGS = config.load_settings()
VERSION = "0.3.0"

# ==============================
# FastAPI App
# ==============================
app = FastAPI(title="Status Page API", version=VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=SETTINGS["cors_origins"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    return JSONResponse({"ok": False, "error": str(exc)}, status_code=400)


@app.exception_handler(OrganizationNotFoundError)
async def org_not_found_handler(request: Request, exc: OrganizationNotFoundError):
    return JSONResponse({"ok": False, "error": str(exc)}, status_code=404)


@app.exception_handler(DataIntegrityError)
async def data_integrity_handler(request: Request, exc: DataIntegrityError):
    logger.error("data_integrity_error", path=request.url.path, field=exc.field, error=str(exc))
    return JSONResponse({"ok": False, "error": str(exc), "field": exc.field}, status_code=500)


@app.get("/about")
def about():
    return {
        "name": "Status Page API",
        "version": VERSION,
        "data_dir": str(config.DATA_DIR),
        "recent_items": SETTINGS["recent_items"],
        "mcp_endpoint": "/mcp",
    }


@app.get("/health/live")
def health_live():
    return {"status": "live", "ts": datetime.now(timezone.utc).isoformat()}


@app.get("/health/ready")
def health_ready():
    ok = config.DATA_DIR.exists()
    return {"status": "ready" if ok else "not_ready", "data_dir": str(config.DATA_DIR)}


@app.post("/cache/clear")
def cache_clear():
    dropped = cache_size()
    clear_cache()
    return {"ok": True, "dropped": dropped}


# ==============================
# Core Tool Logic
# ==============================
def tool_ping() -> Dict[str, Any]:
    return {"message": "pong", "ts": datetime.now(timezone.utc).isoformat()}


def tool_dashboard(organization_id: str, recent: Optional[int] = None) -> Dict[str, Any]:
    loader.get_organization(organization_id)
    return views.build_dashboard(
        loader.list_services(organization_id),
        loader.list_incidents(organization_id),
        loader.list_maintenances(organization_id),
        recent=SETTINGS["recent_items"] if recent is None else recent,
    )


def tool_services_overview(organization_id: str) -> Dict[str, Any]:
    loader.get_organization(organization_id)
    return views.build_services_overview(
        loader.list_services(organization_id),
        loader.list_service_groups(organization_id),
    )


def tool_maintenance_overview(organization_id: str) -> Dict[str, Any]:
    loader.get_organization(organization_id)
    return views.build_maintenance_overview(loader.list_maintenances(organization_id))


def tool_status_page(slug: str) -> Dict[str, Any]:
    org = loader.get_organization_by_slug(slug)
    return views.build_status_page(
        org,
        loader.list_services(org.id),
        loader.list_service_groups(org.id),
        loader.list_incidents(org.id),
        loader.list_maintenances(org.id),
        recent=SETTINGS["recent_items"],
    )


@app.get("/orgs/{organization_id}/dashboard")
def dashboard(organization_id: str, recent: Optional[int] = None):
    return tool_dashboard(organization_id, recent)


@app.get("/orgs/{organization_id}/services")
def services_overview(organization_id: str):
    return tool_services_overview(organization_id)


@app.get("/orgs/{organization_id}/maintenance")
def maintenance_overview(organization_id: str):
    return tool_maintenance_overview(organization_id)


@app.get("/status/{slug}")
def status_page(slug: str):
    return tool_status_page(slug)


# ==============================
# MCP WebSocket tools map
# ==============================
TOOLS = {
    "ping": lambda args: tool_ping(),
    "dashboard": lambda args: tool_dashboard(args["organization_id"], args.get("recent")),
    "services_overview": lambda args: tool_services_overview(args["organization_id"]),
    "maintenance_overview": lambda args: tool_maintenance_overview(args["organization_id"]),
    "status_page": lambda args: tool_status_page(args["slug"]),
    "add_incident": lambda args: updater.add_incident(args["organization_id"], args.get("incident", {})),
    "add_maintenance_update": lambda args: updater.add_maintenance_update(
        args["organization_id"], args["maintenance_id"], args.get("update", {})
    ),
    "set_service_status": lambda args: updater.set_service_status(
        args["organization_id"], args["service_id"], args["status"]
    ),
}


@app.websocket("/mcp")
async def mcp_ws(websocket: WebSocket):
    await websocket.accept()

    await websocket.send_text(
        json.dumps({"ok": True, "message": "Status page MCP WebSocket endpoint ready", "endpoint": "/mcp"})
    )

    try:
        while True:
            try:
                raw = await websocket.receive_text()
            except WebSocketDisconnect:
                break

            try:
                msg = json.loads(raw)
            except ValueError:
                await websocket.send_text(json.dumps({"ok": False, "error": "Message is not valid JSON"}))
                continue

            if not isinstance(msg, dict):
                await websocket.send_text(json.dumps({"ok": False, "error": "Message must be a JSON object"}))
                continue

            tool = msg.get("tool")
            args = msg.get("args", {})

            if not isinstance(tool, str) or tool not in TOOLS:
                await websocket.send_text(
                    json.dumps({"ok": False, "error": f"Unknown tool '{tool}'", "available_tools": list(TOOLS.keys())})
                )
                continue

            if not isinstance(args, dict):
                await websocket.send_text(json.dumps({"ok": False, "error": "args must be a JSON object", "tool": tool}))
                continue

            try:
                result = TOOLS[tool](args)
            except (KeyError, TypeError, AttributeError, ValueError, StatusPageError) as e:
                logger.warning("tool_failed", tool=tool, error=str(e))
                await websocket.send_text(json.dumps({"ok": False, "error": str(e), "tool": tool}))
                continue
            await websocket.send_text(json.dumps(result))

    except WebSocketDisconnect:
        return
    except Exception:
        logger.exception("mcp_ws_failed")
        await websocket.close(code=1011)


@app.get("/")
def root():
    return JSONResponse({"ok": True, "message": "Status page API running", "endpoint": "/mcp"})
