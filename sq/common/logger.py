import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler
from sq.common.setup import PATHS
from datetime import datetime

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# Attaches `handler` under a stable name unless one with that name is already on the logger, so importing the
# logger module twice (tests do) never doubles output.
def _attach(logger, handler_name, make_handler, level, fmt):
    if any(h.get_name() == handler_name for h in logger.handlers):
        return False
    handler = make_handler()
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.set_name(handler_name)
    logger.addHandler(handler)
    return True

# Keeps only the newest `keep` per-run debug logs.
def _prune_debug_runs(debug_dir: Path, name, keep):
    runs = sorted(debug_dir.glob(f"{name}_*.log"), key=lambda p: p.stat().st_mtime, reverse=True)
    for run in runs[keep:]:
        try: run.unlink()
        except OSError: pass

def get_logger(
        name = "sleepquality",
        level = logging.INFO,
        log_dir: Path | None = None,
        max_bytes = 2 * 1024 * 1024,
        backup_count = 3,
        persistent = True,
        console = False,
        historical_debugs: int = 10
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(level)

    log_dir = log_dir or PATHS.logs
    log_dir.mkdir(parents=True,exist_ok=True)
    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)

    # sleepquality.log, rotated across runs
    if persistent:
        _attach(logger, f"{name}:persistent", lambda: RotatingFileHandler(
            filename=log_dir / f"{name}.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        ), level, fmt)

    # latest.log only ever holds the current run
    _attach(logger, f"{name}:latest", lambda: logging.FileHandler(
        filename=log_dir / "latest.log", mode="w", encoding="utf-8"
    ), level, fmt)

    # Full debug output of each run in its own file
    if historical_debugs > 0:
        debug_dir = log_dir / "debug"
        debug_dir.mkdir(parents=True,exist_ok=True)
        run_path = debug_dir / f"{name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
        if _attach(logger, f"{name}:historical_debug",
                   lambda: logging.FileHandler(filename=run_path, encoding="utf-8"), logging.DEBUG, fmt):
            _prune_debug_runs(debug_dir, name, historical_debugs)

    if console:
        _attach(logger, f"{name}:console", logging.StreamHandler, level, fmt)

    return logger

log = get_logger(level=logging.DEBUG,console=False,historical_debugs=10)
log.info("=== NEW SLEEP TRACKER SESSION ===")
