"""Audit logging subsystem for risio.

Main Components
---------------
- AuditLogger: JSONL event log for one conversion run
- LogEvent: One structured event
- generate_run_id, get_environment_info: Run metadata helpers
"""

from risio.audit.helpers import file_sha256, generate_run_id, get_environment_info
from risio.audit.logger import AuditLogger
from risio.audit.models import LogEvent

__all__ = [
    "AuditLogger",
    "LogEvent",
    "file_sha256",
    "generate_run_id",
    "get_environment_info",
]
