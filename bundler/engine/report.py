"""
Build report.

Collects the diagnostics produced while applying rules, keyed by
project-relative file path, and optionally dumps them as JSON.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Union

from bundler.engine.context import PluginLogger


logger = logging.getLogger(__name__)


class Report:
    """Aggregates per-file rule diagnostics for a build."""
    
    def __init__(self):
        self._rules: Dict[str, List[Dict[str, str]]] = {}
        self._started_at = datetime.now(timezone.utc)
    
    def rules_run(self, prj_file: str, log: PluginLogger) -> None:
        """Record the diagnostics of a file's rule run."""
        self._rules.setdefault(prj_file, []).extend(log.to_dict())
        
        for message in log.messages:
            logger.debug(f"[{message.source}] {prj_file}: {message.text}")
    
    @property
    def files(self) -> List[str]:
        return sorted(self._rules)
    
    def messages_for(self, prj_file: str) -> List[Dict[str, str]]:
        return list(self._rules.get(prj_file, []))
    
    def summary(self) -> Dict[str, int]:
        """Counts of processed files and messages by level."""
        entries = [m for messages in self._rules.values() for m in messages]
        return {
            "files": len(self._rules),
            "info": sum(1 for m in entries if m["level"] == "info"),
            "warn": sum(1 for m in entries if m["level"] == "warn"),
            "error": sum(1 for m in entries if m["level"] == "error"),
        }
    
    def to_dict(self) -> Dict[str, Any]:
        rules = {f: list(m) for f, m in sorted(self._rules.items())}
        return {
            "generated_at": self._started_at.isoformat(),
            "summary": self.summary(),
            "rules": rules,
        }
    
    def write(self, path: Union[str, Path]) -> Path:
        """Write the report as JSON, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        logger.info(f"Report written to {path}")
        return path
