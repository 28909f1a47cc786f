import copy, json, logging, time, uuid, datetime as dt
from typing import Optional

from uvicorn.config import LOGGING_CONFIG

oplog = logging.getLogger("webwidget.oplog")

_LEVELS = {
    "OK": logging.INFO,
    "NOT_FOUND": logging.WARNING,
    "ERROR": logging.ERROR,
}


def uvicorn_log_config(level: str = "INFO") -> dict:
    """
    uvicorn's default dictConfig plus the `webwidget` loggers.
    Passed as uvicorn.run(log_config=...) so worker/reload processes apply it too.
    """
    cfg = copy.deepcopy(LOGGING_CONFIG)
    cfg["loggers"]["webwidget"] = {
        "handlers": ["default"],
        "level": str(level).upper(),
        "propagate": False,
    }
    return cfg


class LogContext:
    """One operation record per request: entity, payload, outcome, latency."""

    def __init__(self, action: str):
        self.action = action
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.payload = None
        self.entity_type = None
        self.entity_id = None

    def set_entity(self, etype: str, eid):
        self.entity_type = etype
        self.entity_id = None if eid is None else str(eid)

    def set_payload(self, obj): self.payload = obj

    def _record(self, result: str, err: Optional[str]) -> dict:
        elapsed_ms = int((time.perf_counter() - self.start) * 1000)
        return {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "request_id": self.request_id,
            "payload": self.payload,
            "result": result,
            "err_msg": err,
            "latency_ms": elapsed_ms,
        }

    def write(self, result: str = "OK", err: Optional[str] = None) -> dict:
        rec = self._record(result, err)
        oplog.log(_LEVELS.get(result, logging.INFO), json.dumps(rec, ensure_ascii=False, default=str))
        return rec
