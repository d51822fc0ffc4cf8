"""
Per-file processing context and diagnostic log.

A FileContext is created for each file that has a non-empty loader chain.
It is owned exclusively by that file's pipeline run: loaders read and update
it, the result writer persists it, and it is discarded afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class MessageLevel(str, Enum):
    """Levels of messages recorded by loaders."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True)
class LogMessage:
    """A single diagnostic entry.
    
    Attributes:
        source: Tag of the component that produced the entry (e.g. a loader name)
        level: Message level
        text: Message text
    """
    source: str
    level: MessageLevel
    text: str
    
    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "level": self.level.value, "text": self.text}


class PluginLogger:
    """Append-only diagnostic sink scoped to one file's pipeline run.
    
    Example:
        >>> log = PluginLogger()
        >>> log.info("json-loader", "Generated module for", "data.json")
        >>> log.messages[0].text
        'Generated module for data.json'
    """
    
    def __init__(self):
        self._messages: List[LogMessage] = []
    
    def info(self, source: str, *things: Any) -> None:
        self._add(source, MessageLevel.INFO, things)
    
    def warn(self, source: str, *things: Any) -> None:
        self._add(source, MessageLevel.WARN, things)
    
    def error(self, source: str, *things: Any) -> None:
        self._add(source, MessageLevel.ERROR, things)
    
    @property
    def messages(self) -> List[LogMessage]:
        """Copy of the recorded messages, in insertion order."""
        return list(self._messages)
    
    @property
    def warns_present(self) -> bool:
        return any(m.level == MessageLevel.WARN for m in self._messages)
    
    @property
    def errors_present(self) -> bool:
        return any(m.level == MessageLevel.ERROR for m in self._messages)
    
    def to_dict(self) -> List[Dict[str, str]]:
        return [m.to_dict() for m in self._messages]
    
    def __len__(self) -> int:
        return len(self._messages)
    
    def _add(self, source: str, level: MessageLevel, things: tuple) -> None:
        text = " ".join(str(thing) for thing in things)
        self._messages.append(LogMessage(source=source, level=level, text=text))


@dataclass
class FileContext:
    """Mutable state threaded through a file's loader chain.
    
    Attributes:
        content: Current file content; None means "no output, do not write"
        file_path: Project-relative POSIX path of the processed file
        extra_artifacts: Project-relative path -> content for additional
            outputs; a None value declines to emit that artifact
        log: Diagnostic sink for this file's run
    """
    content: Optional[str]
    file_path: str
    extra_artifacts: Dict[str, Optional[str]] = field(default_factory=dict)
    log: PluginLogger = field(default_factory=PluginLogger)
