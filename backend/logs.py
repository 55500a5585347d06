from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Optional

from . import settings

logger = logging.getLogger("backend.operations")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None):
    logging.basicConfig(level=(level or settings.get_log_level()), format=LOG_FORMAT)


class LogContext:
    """
    单次操作的日志记录：动作、请求 id、实体、请求体、耗时。

    用作上下文管理器：正常退出记 OK，异常退出记 ERROR 并继续抛出。
    """

    def __init__(self, action: str):
        self.action = action
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.payload = None
        self.entity_type = None
        self.entity_id = None
        self.written = False

    def set_entity(self, etype: str, eid):
        self.entity_type = etype
        self.entity_id = str(eid)

    def set_payload(self, obj): self.payload = obj

    def record(self, result: str = "OK", err: Optional[str] = None) -> dict:
        return {
            "action": self.action,
            "request_id": self.request_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "payload": self.payload,
            "result": result,
            "err_msg": err,
            "latency_ms": int((time.perf_counter() - self.start) * 1000),
        }

    def write(self, result: str = "OK", err: Optional[str] = None):
        rec = self.record(result, err)
        line = json.dumps(rec, ensure_ascii=False, default=str)
        if result == "OK":
            logger.info(line)
        else:
            logger.warning(line)
        self.written = True

    def __enter__(self) -> "LogContext":
        return self

    def __exit__(self, exc_type, exc, tb):
        if not self.written:
            if exc is None:
                self.write("OK")
            else:
                self.write("ERROR", getattr(exc, "message", None) or str(exc) or exc_type.__name__)
        return False
