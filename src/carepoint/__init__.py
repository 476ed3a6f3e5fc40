"""CarePoint — healthcare appointment service.

Doctor directory, appointment booking, a rule-based symptom checker,
water-intake tracking, and real-time appointment notifications pushed
over a WebSocket connection.
"""

__version__ = "0.1.0"
