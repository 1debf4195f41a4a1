import json
import logging
import sys
from pathlib import Path
from datetime import datetime, timezone
from chatgpt_mcp.config.settings import settings


def setup_logger() -> logging.Logger:
    logger = logging.getLogger("chatgpt_mcp")
    logger.setLevel(settings.log_level)
    logger.propagate = False
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(log_dir / "server.log", encoding="utf-8")
    fh.setLevel(settings.log_level)

    class JsonFormatter(logging.Formatter):
        def format(self, record: logging.LogRecord) -> str:
            msg = record.getMessage()
            if settings.log_redact_content:
                msg = (msg or "")[:64]
            payload = {
                "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                "level": record.levelname,
                "name": record.name,
                "msg": msg,
            }
            extra = getattr(record, "extra", None)
            if isinstance(extra, dict):
                payload.update(extra)
            return json.dumps(payload, ensure_ascii=False)

    fh.setFormatter(JsonFormatter())
    logger.addHandler(fh)

    # stdout 归 MCP stdio 传输使用，控制台日志只能写 stderr
    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(settings.log_level)
    sh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(sh)
    return logger


logger = setup_logger()
