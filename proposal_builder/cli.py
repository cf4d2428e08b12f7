"""Cyclopts CLI entrypoint for editing proposal templates from the shell.

The ``proposal`` console script works on template YAML files: it creates them,
adds and rearranges sections, adjusts section styles, renders the canvas to
HTML, and syncs templates with the proposal templates API. Every command that
changes a file prints a ``wrote <path>`` line.

Examples
--------
Create a template, add a pricing section, and preview it:

>>> from proposal_builder.cli import app
>>> app(["new", "acme.yaml", "--name", "ACME rollout"])  # doctest: +SKIP
>>> app(["add", "acme.yaml", "pricing"])  # doctest: +SKIP
>>> app(["render", "acme.yaml", "--mode", "preview"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .client import ProposalTemplateClient
from .document import default_template, load_template, save_template
from .dragdrop import DragReorderController, DragState
from .logging_config import configure_logging
from .rendering import ProposalPageBuilder
from .settings import resolve_settings
from .store import SectionStore
from .styles import RenderMode, check_style_range

if typ.TYPE_CHECKING:
    from .document import Template

app = App(name="proposal", config=cyclopts.config.Env("PROPOSAL_", command=False))  # type: ignore[unknown-argument]

Mode = typ.Literal["edit", "preview"]
Alignment = typ.Literal["left", "center", "right", "justify"]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _write(template: Template, path: Path) -> Path:
    written = save_template(template, path)
    print(f"wrote {_format_path(written)}")
    return written


def _require_section(store: SectionStore, section_id: str) -> None:
    if store.section(section_id) is None:
        msg = f"Unknown section id: {section_id}"
        raise ValueError(msg)


def _client(
    api_base: str | None,
    api_token: str | None,
    timeout: float | None,
    config_file: Path | None,
    save_settings: bool,
) -> ProposalTemplateClient:
    settings = resolve_settings(
        api_base=api_base,
        token=api_token,
        timeout=timeout,
        config_path=config_file,
        save=save_settings,
    )
    return ProposalTemplateClient(
        settings.api_base, token=settings.token, timeout=settings.timeout
    )


@app.meta.default
def launcher(
    *tokens: typ.Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    verbose: typ.Annotated[
        bool, Parameter(help="Log debug messages to stderr")
    ] = False,
) -> typ.Any:
    """Configure logging, then dispatch to the requested command."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)
    return app(tokens)


@app.command(help="Write the default two-section template to PATH.")
def new(
    path: Path,
    *,
    name: typ.Annotated[str | None, Parameter(help="Template name")] = None,
    force: typ.Annotated[
        bool, Parameter(help="Overwrite an existing file")
    ] = False,
) -> None:
    """Create a new template file.

    Raises
    ------
    FileExistsError
        If ``path`` exists and ``force`` is not set.
    """
    if path.exists() and not force:
        msg = f"{path} already exists; pass --force to overwrite it"
        raise FileExistsError(msg)
    store = SectionStore(default_template())
    if name:
        store.rename(name=name)
    _write(store.template, path)


@app.command(help="Append a section of KIND and print its id.")
def add(path: Path, kind: str) -> None:
    store = SectionStore(load_template(path))
    section = store.add_section(kind)
    _write(store.template, path)
    print(section.id)


@app.command(help="Delete a section.")
def delete(path: Path, section_id: str) -> None:
    store = SectionStore(load_template(path))
    _require_section(store, section_id)
    _write(store.delete_section(section_id), path)


@app.command(help="Insert a copy of a section right after it and print its id.")
def duplicate(path: Path, section_id: str) -> None:
    store = SectionStore(load_template(path))
    copy = store.duplicate_section(section_id)
    if copy is None:
        msg = f"Unknown section id: {section_id}"
        raise ValueError(msg)
    _write(store.template, path)
    print(copy.id)


@app.command(help="Show a hidden section on the canvas.")
def show(path: Path, section_id: str) -> None:
    store = SectionStore(load_template(path))
    _require_section(store, section_id)
    _write(store.set_visibility(section_id, True), path)


@app.command(help="Hide a section from the canvas and preview.")
def hide(path: Path, section_id: str) -> None:
    store = SectionStore(load_template(path))
    _require_section(store, section_id)
    _write(store.set_visibility(section_id, False), path)


@app.command(help="Lock a section in place.")
def lock(path: Path, section_id: str) -> None:
    store = SectionStore(load_template(path))
    _require_section(store, section_id)
    _write(store.set_locked(section_id, True), path)


@app.command(help="Unlock a section so it can be dragged again.")
def unlock(path: Path, section_id: str) -> None:
    store = SectionStore(load_template(path))
    _require_section(store, section_id)
    _write(store.set_locked(section_id, False), path)


@app.command(help="Drag a section STEPS slots down (negative moves up).")
def move(path: Path, section_id: str, steps: int) -> None:
    """Move a section the way a keyboard drag would.

    The move runs through the drag controller, so locked and hidden sections
    stay put and locked sections are never jumped over. Nothing is written
    when the section does not move.
    """
    store = SectionStore(load_template(path))
    _require_section(store, section_id)
    controller = DragReorderController(store)
    if not controller.start(section_id):
        print(f"{section_id} cannot be moved (locked or hidden)")
        return
    controller.move_by(steps)
    outcome = controller.drop()
    if outcome.state is not DragState.COMMITTED:
        print(f"{section_id} stayed in place")
        return
    _write(store.template, path)


@app.command(help="Set style overrides on a section.")
def style(
    path: Path,
    section_id: str,
    *,
    font_size: typ.Annotated[
        float | None, Parameter(help="Font size in px (8-72)")
    ] = None,
    padding: typ.Annotated[
        float | None, Parameter(help="Padding in px (0-80)")
    ] = None,
    margin: typ.Annotated[
        float | None, Parameter(help="Vertical margin in px (0-40)")
    ] = None,
    alignment: typ.Annotated[
        Alignment | None, Parameter(help="Text alignment")
    ] = None,
    background_color: typ.Annotated[
        str | None, Parameter(help="Background colour, e.g. #FFFFFF")
    ] = None,
    text_color: typ.Annotated[
        str | None, Parameter(help="Text colour, e.g. #333333")
    ] = None,
    font_family: typ.Annotated[
        str | None, Parameter(help="Font family; 'inherit' uses the template font")
    ] = None,
    font_weight: typ.Annotated[
        str | None, Parameter(help="Font weight, e.g. bold")
    ] = None,
    font_style: typ.Annotated[
        str | None, Parameter(help="Font style, e.g. italic")
    ] = None,
    text_decoration: typ.Annotated[
        str | None, Parameter(help="Text decoration, e.g. underline")
    ] = None,
) -> None:
    """Apply the given style overrides to one section.

    Raises
    ------
    ValueError
        If no override is given, the section is unknown, or a slider value
        falls outside its range.
    """
    overrides = {
        "font_size": font_size,
        "padding": padding,
        "margin": margin,
        "alignment": alignment,
        "background_color": background_color,
        "text_color": text_color,
        "font_family": font_family,
        "font_weight": font_weight,
        "font_style": font_style,
        "text_decoration": text_decoration,
    }
    patch = {key: value for key, value in overrides.items() if value is not None}
    if not patch:
        msg = "Provide at least one style option."
        raise ValueError(msg)
    for prop, value in patch.items():
        if isinstance(value, float):
            patch[prop] = int(value) if value.is_integer() else value
            check_style_range(prop, patch[prop])
    store = SectionStore(load_template(path))
    _require_section(store, section_id)
    _write(store.update_section(section_id, {"style": patch}), path)


@app.command(help="Render the template canvas to HTML.")
def render(
    path: Path,
    *,
    mode: typ.Annotated[Mode, Parameter(help="edit or preview")] = "preview",
    output: typ.Annotated[
        Path | None,
        Parameter(help="Output file; defaults to PATH with an .html suffix"),
    ] = None,
    selected: typ.Annotated[
        str | None, Parameter(help="Section to highlight in edit mode")
    ] = None,
) -> None:
    template = load_template(path)
    target = output or path.with_suffix(".html")
    written = ProposalPageBuilder(template, target).run(RenderMode(mode), selected)
    print(f"wrote {_format_path(written)}")


@app.command(help="Save the template to the proposal templates API.")
def push(
    path: Path,
    *,
    api_base: typ.Annotated[str | None, Parameter(help="API base URL")] = None,
    api_token: typ.Annotated[str | None, Parameter(help="Bearer token")] = None,
    timeout: typ.Annotated[
        float | None, Parameter(help="Request timeout in seconds")
    ] = None,
    config_file: typ.Annotated[
        Path | None, Parameter(help="Settings file (TOML)")
    ] = None,
    save_settings: typ.Annotated[
        bool, Parameter(help="Remember the resolved API settings")
    ] = False,
) -> None:
    """Push ``path`` to the server and write back the server's copy.

    A template still carrying the unsaved ``new`` id is created; its file is
    rewritten with the id assigned by the server.
    """
    client = _client(api_base, api_token, timeout, config_file, save_settings)
    saved = client.save(load_template(path))
    print(f"pushed {saved.id}")
    _write(saved, path)


@app.command(help="Download a template from the proposal templates API.")
def pull(
    template_id: str,
    path: Path,
    *,
    api_base: typ.Annotated[str | None, Parameter(help="API base URL")] = None,
    api_token: typ.Annotated[str | None, Parameter(help="Bearer token")] = None,
    timeout: typ.Annotated[
        float | None, Parameter(help="Request timeout in seconds")
    ] = None,
    config_file: typ.Annotated[
        Path | None, Parameter(help="Settings file (TOML)")
    ] = None,
    save_settings: typ.Annotated[
        bool, Parameter(help="Remember the resolved API settings")
    ] = False,
) -> None:
    """Fetch ``template_id`` and write it to ``path``.

    Raises
    ------
    ValueError
        If the server has no template with that id.
    """
    client = _client(api_base, api_token, timeout, config_file, save_settings)
    template = client.fetch(template_id)
    if template is None:
        msg = f"Template '{template_id}' not found on the server"
        raise ValueError(msg)
    _write(template, path)


def main() -> None:
    """Invoke the Cyclopts application that powers the ``proposal`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app.meta()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
