from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from ..config import load_db_config
from ..domain.widget import Widget
from ..errors import DataAccessError
from ..logs import LogContext
from ..services.widget_svc import WidgetDataLayer

router = APIRouter(prefix="/api/v1/Widget", tags=["widget"])

DB_UNAVAILABLE = "Database unavailable."
INTERNAL_ERROR = "Internal server error."


class WidgetIn(BaseModel):
    name: str
    description: str | None = None
    cost: float = 0.0
    location: str | None = None


class WidgetOut(WidgetIn):
    id: int


def get_data_layer() -> WidgetDataLayer:
    return WidgetDataLayer(load_db_config())


def _not_found(widget_id: int) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Widget {widget_id} not found.")


def _to_widget(body: WidgetIn) -> Widget:
    return Widget(name=body.name, description=body.description, cost=body.cost, location=body.location)


@router.get("", response_model=list[WidgetOut])
def api_widget_list(dl: WidgetDataLayer = Depends(get_data_layer)):
    log = LogContext("WIDGET_LIST")
    try:
        widgets = dl.list_widgets()
    except DataAccessError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=503, detail=DB_UNAVAILABLE) from e
    except Exception as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR) from e
    log.write("OK")
    return [w.to_dict() for w in widgets]


@router.get("/{widget_id}", response_model=WidgetOut)
def api_widget_get(widget_id: int, dl: WidgetDataLayer = Depends(get_data_layer)):
    log = LogContext("WIDGET_GET")
    log.set_entity("widget", widget_id)
    try:
        widget = dl.get_widget_by_id(widget_id)
    except DataAccessError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=503, detail=DB_UNAVAILABLE) from e
    except Exception as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR) from e
    if widget is None:
        log.write("NOT_FOUND")
        raise _not_found(widget_id)
    log.write("OK")
    return widget.to_dict()


@router.post("", response_model=WidgetOut, status_code=201)
def api_widget_create(body: WidgetIn, dl: WidgetDataLayer = Depends(get_data_layer)):
    log = LogContext("WIDGET_CREATE")
    log.set_payload(body.model_dump())
    try:
        created = dl.insert_widget(_to_widget(body))
    except ValueError as ve:
        log.write("ERROR", str(ve))
        raise HTTPException(status_code=400, detail=str(ve))
    except DataAccessError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=503, detail=DB_UNAVAILABLE) from e
    except Exception as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR) from e
    if created is None:
        log.write("ERROR", "no_row_inserted")
        raise HTTPException(status_code=500, detail="Widget could not be created.")
    log.set_entity("widget", created.id)
    log.write("OK")
    return created.to_dict()


@router.put("/{widget_id}", response_model=WidgetOut)
def api_widget_update(widget_id: int, body: WidgetIn, dl: WidgetDataLayer = Depends(get_data_layer)):
    log = LogContext("WIDGET_UPDATE")
    log.set_entity("widget", widget_id)
    log.set_payload(body.model_dump())
    widget = _to_widget(body).with_id(widget_id)
    try:
        count = dl.update_widget(widget_id, widget)
    except ValueError as ve:
        log.write("ERROR", str(ve))
        raise HTTPException(status_code=400, detail=str(ve))
    except DataAccessError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=503, detail=DB_UNAVAILABLE) from e
    except Exception as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR) from e
    if count == 0:
        log.write("NOT_FOUND")
        raise _not_found(widget_id)
    log.write("OK")
    return widget.to_dict()


@router.delete("/{widget_id}", status_code=204)
def api_widget_delete(widget_id: int, dl: WidgetDataLayer = Depends(get_data_layer)):
    log = LogContext("WIDGET_DELETE")
    log.set_entity("widget", widget_id)
    try:
        count = dl.delete_widget(widget_id)
    except DataAccessError as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=503, detail=DB_UNAVAILABLE) from e
    except Exception as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR) from e
    if count == 0:
        log.write("NOT_FOUND")
        raise _not_found(widget_id)
    log.write("OK")
    return Response(status_code=204)
