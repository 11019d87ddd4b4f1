"""Signal synthesis from the scored news corpus."""

from .generator import SignalGenerator, detect_alerts, should_alert
from .models import Signal, SignalTemplate
from .templates import load_signal_templates

__all__ = [
    "Signal",
    "SignalGenerator",
    "SignalTemplate",
    "detect_alerts",
    "load_signal_templates",
    "should_alert",
]
