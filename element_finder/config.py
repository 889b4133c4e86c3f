from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List

import yaml

from .engine import DocumentKind, ParseOption
from .translators import ExpressionTranslator, translator_for


def _default_options() -> List[str]:
    return ["NOWARNING", "NOERROR", "NOCDATA"]


@dataclass
class FinderConfig:
    """Defaults used to build documents from the command line or a config file."""

    kind: str = "html"
    options: List[str] = field(default_factory=_default_options)
    translator: str = "xpath"
    namespaces: Dict[str, str] = field(default_factory=dict)

    def document_kind(self) -> DocumentKind:
        return DocumentKind.coerce(self.kind)

    def parse_options(self) -> ParseOption:
        flags = ParseOption(0)
        for name in self.options:
            member = ParseOption.__members__.get(str(name).strip().upper())
            if member is None:
                raise ValueError(f"Unknown parse option {name!r}")
            flags |= member
        return flags

    def build_translator(self) -> ExpressionTranslator:
        return translator_for(self.translator, self.document_kind())


def _load_yaml(path: Path) -> dict:
    with path.open("r", encoding="utf8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping, got {type(data)!r}")
    return data


def load_config(path: Path | str) -> FinderConfig:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    raw = _load_yaml(path)
    unknown = set(raw) - set(FinderConfig.__dataclass_fields__)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    options = raw.get("options")
    if options is not None and not isinstance(options, list):
        raise ValueError("'options' must be a list")
    namespaces = raw.get("namespaces") or {}
    if not isinstance(namespaces, dict):
        raise ValueError("'namespaces' must be a mapping")

    config = FinderConfig(**{key: value for key, value in raw.items() if value is not None})
    # Fail early on bad names rather than at the first parse.
    config.parse_options()
    config.build_translator()
    return config


def save_config(config: FinderConfig, path: Path | str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf8") as fh:
        yaml.safe_dump(asdict(config), fh, sort_keys=False)
