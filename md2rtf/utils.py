import os
import re
import json
import datetime as dt
import logging
from logging.handlers import TimedRotatingFileHandler
from typing import Optional
from jsonschema import validate, Draft202012Validator
from jsonschema.exceptions import ValidationError

DEFAULT_FILENAME = "combined-markdown"

# ---------- Size helpers ----------

def byte_size(text: str) -> int:
    """Length of ``text`` once encoded as UTF-8, i.e. its size on disk."""
    return len((text or "").encode("utf-8"))

# ---------- Filename helpers ----------

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')

def sanitize_filename(filename: Optional[str]) -> str:
    """Make a user supplied name safe to write as an ``.rtf`` file.

    - Strips ``< > : " / \\ | ? *`` and surrounding whitespace
    - Falls back to ``combined-markdown`` when nothing is left
    - Appends ``.rtf`` unless already present (case-insensitive)
    """
    sanitized = _UNSAFE_FILENAME_CHARS.sub("", filename or "").strip()
    if not sanitized:
        sanitized = DEFAULT_FILENAME
    if not sanitized.lower().endswith(".rtf"):
        sanitized += ".rtf"
    return sanitized

# ---------- Config validation ----------

def load_file(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()

def validate_config(cfg: dict):
    here = os.path.dirname(os.path.abspath(__file__))
    schema_path = os.path.join(here, "schemas", "config.schema.json")
    schema = json.loads(load_file(schema_path))
    try:
        validate(instance=cfg, schema=schema, cls=Draft202012Validator)
    except ValidationError as e:
        raise ValueError(f"Config validation error: {e.message} at {list(e.path)}") from e

# ---------- Output writer ----------

def write_output(rtf: str, stats: Optional[dict], out_cfg: dict):
    out_dir = out_cfg["dir"]
    os.makedirs(out_dir, exist_ok=True)
    rtf_path = os.path.join(out_dir, sanitize_filename(out_cfg.get("filename")))

    generated_files = []

    # RTF readers expect the bytes exactly as rendered, no newline translation
    with open(rtf_path, "w", encoding="utf-8", newline="") as f:
        f.write(rtf)
    generated_files.append(rtf_path)

    if stats is not None and out_cfg.get("write_stats", True):
        stats_path = os.path.splitext(rtf_path)[0] + ".stats.json"
        with open(stats_path, "w", encoding="utf-8") as f:
            json.dump(stats, f, ensure_ascii=False, indent=2)
        generated_files.append(stats_path)

    return generated_files

# ---------- Logging ----------

_LOGGER_INITIALIZED = False

class JsonFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            "ts": dt.datetime.fromtimestamp(record.created, dt.timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def _build_logger():
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    # File logging is opt-in so library use never writes to the cwd
    log_dir = os.getenv("LOG_DIR")
    json_mode = os.getenv("LOG_JSON", "false").lower() == "true"

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level, logging.INFO))

    if json_mode:
        fmt = JsonFormatter()
    else:
        fmt = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")

    ch = logging.StreamHandler()
    ch.setLevel(logger.level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = TimedRotatingFileHandler(os.path.join(log_dir, "md2rtf.log"), when="D", backupCount=7, encoding="utf-8")
        fh.setLevel(logger.level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    _LOGGER_INITIALIZED = True

def get_logger(name: str = None) -> logging.Logger:
    _build_logger()
    return logging.getLogger(name if name else __name__)
