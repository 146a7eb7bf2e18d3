from pathlib import Path

import pytest

from engagement_telemetry.adapters.manual import ManualScheduler
from engagement_telemetry.adapters.recording_transport import RecordingTransport
from engagement_telemetry.engine import TelemetryEngine
from engagement_telemetry.rules import load_rules

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def scheduler() -> ManualScheduler:
    scheduler = ManualScheduler()
    yield scheduler
    scheduler.close()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def rules():
    """Load the REAL rules from the project root."""
    rules_path = PROJECT_ROOT / "rules.yaml"
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)


@pytest.fixture
def engine(transport: RecordingTransport, scheduler: ManualScheduler, rules) -> TelemetryEngine:
    engine = TelemetryEngine(
        transport=transport,
        scheduler=scheduler,
        clock=scheduler.clock,
        rules=rules,
    )
    yield engine
    engine.close()
