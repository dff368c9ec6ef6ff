from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import jsonschema
import yaml

from .detect import AUTO
from .types import DateLayout, Rule, RuleConfigError, ValueKind

# Shape of a rules file. Kinds and layouts are free strings: an unknown
# spelling is reported per value when the rule runs.
RULES_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "version": {"type": ["string", "integer"]},
        "delimiter": {"type": "string", "minLength": 1},
        "has_header": {"type": "boolean"},
        "row_budget": {"type": ["integer", "null"], "minimum": 0},
        "max_rules": {"type": ["integer", "null"], "minimum": 0},
        "rules": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["column"],
                "properties": {
                    "column": {"type": ["integer", "string"]},
                    "kind": {"type": "string"},
                    "type": {"type": "string"},
                    "layout": {"type": "string"},
                    "date_format": {"type": "string"},
                    "required": {"type": "boolean"},
                },
                "additionalProperties": False,
            },
        },
    },
    "additionalProperties": False,
}


def validate_config_dict(d: Dict[str, Any]) -> None:
    """Raise ValueError naming the offending path when ``d`` is not a rules file."""
    if not isinstance(d, dict):
        raise ValueError("rules file must contain a mapping at the top level")
    try:
        jsonschema.validate(instance=d, schema=RULES_SCHEMA)
    except jsonschema.ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ValueError(f"invalid rules file at {where}: {e.message}") from e


def _coerce_kind(s: str):
    try:
        return ValueKind(s)
    except ValueError:
        return s


def _coerce_layout(s: str):
    try:
        return DateLayout(s)
    except ValueError:
        return s


def normalize_rules(items: List[dict]) -> List[Rule]:
    out: List[Rule] = []
    for r in items or []:
        out.append(Rule(
            column=r["column"],
            kind=_coerce_kind(r.get("kind", r.get("type", "text"))),
            date_layout=_coerce_layout(r.get("layout", r.get("date_format", "ISO"))),
            required=bool(r.get("required", False)),
        ))
    return out


@dataclass
class ValidationConfig:
    """
    Everything a validation run needs besides the text itself.

    Fields:
      delimiter  : single character or "auto"
      has_header : first record is the header
      row_budget : max data records the rules look at (None = all)
      max_rules  : host-imposed cap on len(rules) (None = no cap)
    """

    rules: List[Rule] = field(default_factory=list)
    delimiter: str = AUTO
    has_header: bool = True
    row_budget: Optional[int] = None
    max_rules: Optional[int] = None

    def __post_init__(self):
        if self.max_rules is not None and len(self.rules) > self.max_rules:
            raise RuleConfigError(
                f"{len(self.rules)} rule(s) configured but at most {self.max_rules} are allowed"
            )
        if self.row_budget is not None and self.row_budget < 0:
            raise ValueError(f"row_budget must be >= 0, got {self.row_budget}")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, cfg: Dict[str, Any] | None) -> "ValidationConfig":
        """
        Build from a parsed rules file:

        version: "1"
        delimiter: auto
        has_header: true
        row_budget: 100
        rules:
          - { column: 1, kind: email, required: true }
          - { column: joined, kind: date, layout: DD/MM/YYYY }
        """
        if cfg is None:
            return cls()
        validate_config_dict(cfg)
        return cls(
            rules=normalize_rules(cfg.get("rules", [])),
            delimiter=cfg.get("delimiter", AUTO),
            has_header=cfg.get("has_header", True),
            row_budget=cfg.get("row_budget"),
            max_rules=cfg.get("max_rules"),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "ValidationConfig":
        path = Path(path).expanduser().resolve()
        if not path.is_file():
            raise FileNotFoundError(path)
        with path.open("r", encoding="utf-8") as f:
            try:
                cfg = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"invalid rules file: {e}") from e
        return cls.from_dict(cfg)

    # ------------------------------------------------------------------
    # Overrides
    # ------------------------------------------------------------------
    def override(self, **changes: Any) -> "ValidationConfig":
        """Copy with every non-None keyword applied (command-line flags win)."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes)

    def snapshot(self) -> Tuple[Rule, ...]:
        return tuple(self.rules)
