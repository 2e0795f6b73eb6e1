# Re-export tool modules so `from rotation_advisor import tools; tools.risk_alerts...` works.
from . import risk_alerts
from . import rotation_signals
