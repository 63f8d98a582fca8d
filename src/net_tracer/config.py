from __future__ import annotations

# Destination used when none is given on the command line
DEFAULT_DESTINATION = "8.8.8.8"  # Google DNS

# Probe settings
SAMPLE_PERIOD_SECONDS = 0.25  # sleep between probes
PING_TIMEOUT_SECONDS = 1.0  # fail if no reply within this time

# Sliding window for packet loss percentage
LOSS_WINDOW_SECONDS = 30.0
MIN_SAMPLES_FOR_LOSS = 10

# Alert thresholds
HIGH_LATENCY_MS = 100
LOSS_THRESHOLD_PCT = 10

# Minimum time between two notifications of the same kind (seconds)
LATENCY_COOLDOWN_SECONDS = 30.0
ERROR_COOLDOWN_SECONDS = 30.0
LOSS_COOLDOWN_SECONDS = 30.0

# Desktop notifications
NOTIFICATION_TITLE = "NET TRACER"
NOTIFICATION_TIMEOUT_MS = 5000
STARTUP_MESSAGE = "NET TRACER running"

# Console logging
LOG_LEVEL = "INFO"
