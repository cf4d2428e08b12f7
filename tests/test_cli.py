"""Tests for the ``proposal`` command functions."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import pytest

from proposal_builder import cli
from proposal_builder.document import default_template, load_template

if typ.TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture


@pytest.fixture
def template_path(tmp_path: Path) -> Path:
    path = tmp_path / "proposal.yaml"
    cli.new(path, name="ACME rollout")
    return path


def test_new_writes_default_template(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "fresh.yaml"
    cli.new(path, name="ACME rollout")
    template = load_template(path)
    assert template.name == "ACME rollout"
    assert template.section_ids == ("cover", "executive")
    assert capsys.readouterr().out.startswith("wrote "), "expected a wrote line"


def test_new_refuses_to_overwrite(template_path: Path) -> None:
    with pytest.raises(FileExistsError):
        cli.new(template_path)
    cli.new(template_path, force=True)


def test_add_prints_new_section_id(
    template_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    capsys.readouterr()
    cli.add(template_path, "pricing")
    lines = capsys.readouterr().out.splitlines()
    new_id = lines[-1]
    assert load_template(template_path).section_ids == ("cover", "executive", new_id)


def test_duplicate_and_delete(
    template_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    capsys.readouterr()
    cli.duplicate(template_path, "cover")
    copy_id = capsys.readouterr().out.splitlines()[-1]
    assert load_template(template_path).section_ids == ("cover", copy_id, "executive")
    cli.delete(template_path, copy_id)
    assert load_template(template_path).section_ids == ("cover", "executive")
    with pytest.raises(ValueError, match="Unknown section id"):
        cli.delete(template_path, "nope")


def test_visibility_and_lock_commands(template_path: Path) -> None:
    cli.hide(template_path, "executive")
    cli.lock(template_path, "cover")
    template = load_template(template_path)
    executive = template.get_section("executive")
    cover = template.get_section("cover")
    assert executive is not None
    assert cover is not None
    assert not executive.is_visible
    assert cover.is_locked
    cli.show(template_path, "executive")
    cli.unlock(template_path, "cover")
    template = load_template(template_path)
    assert [section.id for section in template.visible_sections()] == [
        "cover",
        "executive",
    ]


def test_move_reorders_through_controller(template_path: Path) -> None:
    cli.move(template_path, "cover", 1)
    assert load_template(template_path).section_ids == ("executive", "cover")


def test_move_locked_section_leaves_file_alone(
    template_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.lock(template_path, "cover")
    before = template_path.read_text(encoding="utf-8")
    capsys.readouterr()
    cli.move(template_path, "cover", 1)
    assert "cannot be moved" in capsys.readouterr().out
    assert template_path.read_text(encoding="utf-8") == before


def test_style_applies_overrides(template_path: Path) -> None:
    cli.style(template_path, "executive", padding=24.0, alignment="justify")
    section = load_template(template_path).get_section("executive")
    assert section is not None
    assert section.style.padding == 24
    assert isinstance(section.style.padding, int), "whole numbers stay integers"
    assert section.style.alignment == "justify"
    assert section.style.font_size == 16, "existing overrides are kept"


def test_style_rejects_out_of_range_values(template_path: Path) -> None:
    with pytest.raises(ValueError, match="padding"):
        cli.style(template_path, "executive", padding=120.0)
    with pytest.raises(ValueError, match="at least one"):
        cli.style(template_path, "executive")


def test_render_writes_html_next_to_template(template_path: Path) -> None:
    cli.render(template_path, mode="edit", selected="cover")
    output = template_path.with_suffix(".html")
    html = output.read_text(encoding="utf-8")
    assert 'data-mode="edit"' in html
    assert "is-selected" in html


def test_push_writes_back_server_copy(
    template_path: Path,
    tmp_path: Path,
    mocker: MockerFixture,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("PROPOSAL_CONFIG_FILE", str(tmp_path / "config.toml"))
    client_cls = mocker.patch("proposal_builder.cli.ProposalTemplateClient")
    client_cls.return_value.save.return_value = dc.replace(
        default_template(), id="17", name="ACME rollout"
    )
    cli.push(template_path, api_base="https://crm.example/api", api_token="t")
    client_cls.assert_called_once_with(
        "https://crm.example/api", token="t", timeout=10.0
    )
    assert load_template(template_path).id == "17"


def test_pull_missing_template_raises(
    tmp_path: Path, mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("PROPOSAL_CONFIG_FILE", str(tmp_path / "config.toml"))
    client_cls = mocker.patch("proposal_builder.cli.ProposalTemplateClient")
    client_cls.return_value.fetch.return_value = None
    with pytest.raises(ValueError, match="not found"):
        cli.pull("42", tmp_path / "pulled.yaml")
    assert not (tmp_path / "pulled.yaml").exists()
