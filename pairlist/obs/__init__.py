from pairlist.obs.logging import JsonLineFormatter, LogSettings, build_logger, log_event

__all__ = ["JsonLineFormatter", "LogSettings", "build_logger", "log_event"]
