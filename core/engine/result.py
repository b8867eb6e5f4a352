from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class AnalysisResult:
    """Result of a built-in engine query.

    The JSON form nests the mode-specific payload under the mode name, e.g.
    ``{"mode": "describe", "pos": "...", "describe": {...}}``.
    """

    mode: str
    pos: str
    payload: Dict[str, Any]
    lines: List[str] = field(default_factory=list)

    def to_serializable(self) -> Dict[str, Any]:
        return {"mode": self.mode, "pos": self.pos, self.mode: self.payload}

    def to_text(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)
