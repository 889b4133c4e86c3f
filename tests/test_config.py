from __future__ import annotations

from pathlib import Path

import pytest

from element_finder import CssExpression, Document, DocumentKind, ParseOption
from element_finder.config import FinderConfig, load_config, save_config


def test_defaults_match_document_defaults() -> None:
    config = FinderConfig()

    assert config.document_kind() is DocumentKind.HTML
    assert config.parse_options() == ParseOption.NOWARNING | ParseOption.NOERROR | ParseOption.NOCDATA


def test_load_config_reads_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "finder.yaml"
    config_path.write_text(
        """
kind: xml
translator: css
options:
  - nowarning
  - NOBLANKS
namespaces:
  atom: http://www.w3.org/2005/Atom
        """.strip()
    )

    config = load_config(config_path)

    assert config.document_kind() is DocumentKind.XML
    assert config.parse_options() == ParseOption.NOWARNING | ParseOption.NOBLANKS
    assert isinstance(config.build_translator(), CssExpression)
    assert config.namespaces == {"atom": "http://www.w3.org/2005/Atom"}


def test_document_from_config(tmp_path: Path) -> None:
    config_path = tmp_path / "finder.yaml"
    config_path.write_text("kind: xml\ntranslator: css\n")

    document = Document.from_config("<r><item>1</item><item>2</item></r>", load_config(config_path))

    assert document.kind is DocumentKind.XML
    assert document.value("item") == ["1", "2"]


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "options: NOERROR\n",
        "options: [NOTHING]\n",
        "translator: jquery\n",
        "kind: json\n",
        "colour: blue\n",
        "namespaces: [a]\n",
    ],
)
def test_load_config_rejects_bad_content(tmp_path: Path, content: str) -> None:
    config_path = tmp_path / "finder.yaml"
    config_path.write_text(content)

    with pytest.raises(ValueError):
        load_config(config_path)


def test_save_config_round_trips(tmp_path: Path) -> None:
    config = FinderConfig(kind="xml", translator="shorthand", options=["NOCOMMENTS"])
    path = tmp_path / "nested" / "finder.yaml"

    save_config(config, path)

    assert load_config(path) == config
