# road_spelling/io/check_logging.py
import json
import logging
import sys

from road_spelling.runtime.hooks import NoopHooks


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def default_json_logger(name="road_spelling", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class CheckLogging(NoopHooks):
    """
    Shapes and emits structured logs for a check run. Flags and errors are always
    logged; per-segment progress only in debug mode, every `sample_every` segments.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1000,
        logger: logging.Logger | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.log = logger or default_json_logger(level=level)

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id, **extra}
        self.log.log(getattr(logging, level), msg, extra={"extra": payload})

    def run_start(self, *, candidates: int, workers: int):
        self._emit("INFO", "run_start", candidates=candidates, workers=workers)

    def run_end(self, *, checked: int, flagged: int, errors: int, wall_ms: float):
        self._emit(
            "INFO", "run_end", checked=checked, flagged=flagged, errors=errors, wall_ms=wall_ms
        )

    def segment_start(self, segment, *, seq: int):
        if self.debug and (seq % self.sample_every) == 0:
            self._emit("DEBUG", "segment_start", seq=seq, segment_id=segment.id)

    def flag(self, flag, *, seq: int):
        self._emit(
            "INFO",
            "flag",
            seq=seq,
            segment_id=flag.start.id,
            name=flag.start.name,
            flagged=[{"id": p.other_id, "name": p.other_name} for p in flag.pairs],
        )

    def error(self, segment, *, exc: BaseException, **extra):
        self._emit(
            "ERROR",
            "check_error",
            segment_id=getattr(segment, "id", None),
            error=str(exc),
            error_type=type(exc).__name__,
            **extra,
        )
