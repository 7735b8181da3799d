# -*- coding: utf-8 -*-
"""Monitoring manager (MonitoringManager) implementation.

Structured JSON logging for every planner module, plus the optional
Prometheus metrics and OpenTelemetry spans recorded around plan generation.
"""
import json
import logging
import logging.handlers
from pathlib import Path
from typing import Any, Dict, Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from prometheus_client import Counter, Gauge, Histogram, start_http_server

from edumind.config_manager.config_manager import ConfigManager

# Prometheus collectors are process-wide; re-registering a name raises.
_PROMETHEUS_METRICS: Dict[str, Any] = {}
_PROMETHEUS_SERVER_STARTED = False


class StructuredJsonFormatter(logging.Formatter):
    """Formats each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "funcName": record.funcName,
            "lineno": record.lineno,
        }
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        context = getattr(record, "context", None)
        if context:
            if isinstance(context, dict):
                log_record.update(context)
            else:
                log_record["context"] = str(context)
        return json.dumps(log_record, ensure_ascii=False, default=str)


class MonitoringManager:
    """
    Observability facade used by every EduMind module: logging with a context
    dict, metrics and tracing spans.
    """

    def __init__(self, config_manager: ConfigManager):
        """
        Args:
            config_manager: ConfigManager instance providing ``monitoring.*`` settings.
        """
        self.config_manager = config_manager
        self.logger = logging.getLogger(__name__)
        self.tracer = None
        self.prometheus_enabled = bool(
            self.config_manager.get_config("monitoring.prometheus.enabled", False)
        )

        self._setup_logging()
        self._setup_prometheus()
        self._setup_opentelemetry()

        self.logger.info("MonitoringManager initialized.")

    def _setup_logging(self):
        """Configures the handlers of the module logger from ``monitoring.logging``."""
        log_enabled = self.config_manager.get_config("monitoring.logging.enabled", True)
        log_level_str = str(self.config_manager.get_config("monitoring.logging.level", "INFO"))
        log_level = getattr(logging, log_level_str.upper(), logging.INFO)

        self.logger.setLevel(log_level)
        self.logger.propagate = False
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        if not log_enabled:
            self.logger.addHandler(logging.NullHandler())
            return

        structured_json = self.config_manager.get_config("monitoring.logging.structured_json", True)
        formatter = (
            StructuredJsonFormatter()
            if structured_json
            else logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

        if self.config_manager.get_config("monitoring.logging.console", False):
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        log_filepath = Path(
            self.config_manager.get_config("monitoring.logging.filepath", "logs/edumind.log")
        )
        log_filepath.parent.mkdir(parents=True, exist_ok=True)

        rotation_config = self.config_manager.get_config("monitoring.logging.rotation", {})
        if not isinstance(rotation_config, dict):
            rotation_config = {}
        rotation_type = str(rotation_config.get("type", "size")).lower()

        if rotation_type == "size":
            handler = logging.handlers.RotatingFileHandler(
                log_filepath,
                maxBytes=rotation_config.get("max_bytes", 5 * 1024 * 1024),
                backupCount=rotation_config.get("backup_count", 3),
                encoding="utf-8",
            )
        elif rotation_type == "time":
            handler = logging.handlers.TimedRotatingFileHandler(
                log_filepath,
                when=rotation_config.get("when", "D"),
                interval=rotation_config.get("interval", 1),
                backupCount=rotation_config.get("backup_count", 7),
                encoding="utf-8",
            )
        else:
            handler = logging.FileHandler(log_filepath, encoding="utf-8")

        handler.setFormatter(formatter)
        self.logger.addHandler(handler)
        self.logger.info(
            f"Logging configured. Level: {log_level_str}, Path: {log_filepath}, "
            f"Structured: {structured_json}, Rotation: {rotation_type}"
        )

    def _log(
        self,
        level: int,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        exc_info=None,
        **kwargs,
    ):
        """Logs ``message``; ``context`` and kwargs travel as the record's context."""
        extra_info = {}
        if context:
            extra_info.update(context)
        if kwargs:
            extra_info.update(kwargs)

        if extra_info:
            self.logger.log(level, message, exc_info=exc_info, extra={"context": extra_info})
        else:
            self.logger.log(level, message, exc_info=exc_info)

    def log_debug(self, message: str, context: Optional[Dict[str, Any]] = None, **kwargs):
        self._log(logging.DEBUG, message, context, **kwargs)

    def log_info(self, message: str, context: Optional[Dict[str, Any]] = None, **kwargs):
        self._log(logging.INFO, message, context, **kwargs)

    def log_warning(self, message: str, context: Optional[Dict[str, Any]] = None, **kwargs):
        self._log(logging.WARNING, message, context, **kwargs)

    def log_error(self, message: str, context: Optional[Dict[str, Any]] = None, exc_info=None, **kwargs):
        self._log(logging.ERROR, message, context, exc_info=exc_info, **kwargs)

    def log_exception(self, message: str, context: Optional[Dict[str, Any]] = None, **kwargs):
        """Error-level log carrying the active exception's traceback."""
        self._log(logging.ERROR, message, context, exc_info=True, **kwargs)

    def _setup_prometheus(self):
        """Starts the Prometheus HTTP exporter once per process when enabled."""
        global _PROMETHEUS_SERVER_STARTED
        if not self.prometheus_enabled:
            self.logger.debug("Prometheus metrics export is disabled.")
            return
        if _PROMETHEUS_SERVER_STARTED:
            return

        port = self.config_manager.get_config("monitoring.prometheus.port", 9091)
        try:
            start_http_server(port)
            _PROMETHEUS_SERVER_STARTED = True
            self.logger.info(f"Prometheus metrics server started on port {port}.")
        except OSError as e:
            self.logger.error(f"Failed to start Prometheus server on port {port}: {e}", exc_info=True)

    def record_metric(
        self,
        metric_name: str,
        value: float,
        metric_type: str = "gauge",
        tags: Optional[Dict[str, str]] = None,
        description: str = "",
    ):
        """
        Records a metric value.

        Args:
            metric_name: Prometheus metric name.
            value: Increment (counter), observation (histogram) or level (gauge).
            metric_type: "gauge", "counter" or "histogram".
            tags: Label values; the label names are the sorted keys.
            description: Help text used when the collector is first created.
        """
        if not self.prometheus_enabled:
            self.log_debug(
                "Metric recorded (Prometheus disabled)",
                {"metric_name": metric_name, "value": value, "type": metric_type, "tags": tags},
            )
            return

        label_names = sorted(tags.keys()) if tags else []
        metric_key = f"{metric_name}:{','.join(label_names)}"
        metric_type = metric_type.lower()

        collector = _PROMETHEUS_METRICS.get(metric_key)
        if collector is None:
            help_text = description or f"{metric_type.capitalize()} metric: {metric_name}"
            if metric_type == "counter":
                collector = Counter(metric_name, help_text, label_names)
            elif metric_type == "histogram":
                buckets = self.config_manager.get_config(
                    f"monitoring.prometheus.metrics.{metric_name}.buckets"
                )
                if buckets:
                    collector = Histogram(metric_name, help_text, label_names, buckets=tuple(buckets))
                else:
                    collector = Histogram(metric_name, help_text, label_names)
            else:
                collector = Gauge(metric_name, help_text, label_names)
            _PROMETHEUS_METRICS[metric_key] = collector

        target = collector.labels(**{k: str(tags[k]) for k in label_names}) if label_names else collector
        if metric_type == "counter":
            target.inc(value)
        elif metric_type == "histogram":
            target.observe(value)
        else:
            target.set(value)

    def _setup_opentelemetry(self):
        """Installs a tracer provider when ``monitoring.opentelemetry.enabled`` is set."""
        if not self.config_manager.get_config("monitoring.opentelemetry.enabled", False):
            self.logger.debug("OpenTelemetry tracing is disabled.")
            return

        service_name = self.config_manager.get_config(
            "monitoring.opentelemetry.service_name", "EduMindPlanner"
        )
        exporter_type = str(
            self.config_manager.get_config("monitoring.opentelemetry.exporter_type", "console")
        ).lower()

        exporter = ConsoleSpanExporter()
        if exporter_type == "otlp_http":
            otlp_endpoint = self.config_manager.get_config("monitoring.opentelemetry.otlp_endpoint")
            if otlp_endpoint:
                from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

                exporter = OTLPSpanExporter(endpoint=otlp_endpoint)
            else:
                self.logger.warning(
                    "OTLP HTTP exporter selected but 'monitoring.opentelemetry.otlp_endpoint' is not set. Using console exporter."
                )
        elif exporter_type != "console":
            self.logger.warning(f"Unsupported OpenTelemetry exporter type: {exporter_type}. Using console exporter.")

        provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))
        provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)
        self.tracer = trace.get_tracer(__name__)
        self.logger.info(f"OpenTelemetry tracing initialized. Service: {service_name}, Exporter: {exporter_type}")

    def start_span(self, span_name: str, attributes: Optional[Dict[str, Any]] = None):
        """Starts a span, or returns None when tracing is disabled."""
        if not self.tracer:
            return None
        return self.tracer.start_span(span_name, kind=trace.SpanKind.CLIENT, attributes=attributes)

    def end_span(self, span: Optional[Any], exc: Optional[BaseException] = None):
        """Ends ``span``, marking it as failed when ``exc`` is given."""
        if span is None:
            return
        if exc is not None:
            span.record_exception(exc)
            span.set_status(trace.Status(trace.StatusCode.ERROR, str(exc)))
        else:
            span.set_status(trace.Status(trace.StatusCode.OK))
        span.end()
