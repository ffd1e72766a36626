"""CSV statement import view."""

from __future__ import annotations

from typing import TYPE_CHECKING

import flet as ft

from ...logging_config import get_logger
from ...services import SUPPORTED_FORMATS, ImportSession
from ...services.import_flow import ACCEPTED_SUFFIXES
from ..components import build_app_bar, build_card, build_main_layout

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger(__name__)

ROUTE = "/import"
SUCCESS_TITLE = "Import completed successfully"
FAILURE_TITLE = "Import failed"


def build_import_view(ctx: AppContext, page: ft.Page) -> ft.View:
    """Build the import page: file picker, upload button and outcome panel."""

    session = ImportSession(ctx.client)

    file_label = ft.Text("No file selected", color=ft.Colors.ON_SURFACE_VARIANT)
    upload_button = ft.FilledButton("Upload", icon=ft.Icons.CLOUD_UPLOAD, disabled=True)
    clear_button = ft.TextButton("Clear", disabled=True)
    progress = ft.ProgressRing(width=20, height=20, visible=False)

    result_title = ft.Text("", size=16, weight=ft.FontWeight.BOLD)
    result_lines = ft.Column(spacing=4)
    result_panel = ft.Container(
        content=ft.Column([result_title, result_lines], spacing=8),
        padding=16,
        border_radius=8,
        visible=False,
    )

    def _render() -> None:
        if session.selected is not None:
            file_label.value = session.selected.name
        else:
            file_label.value = "No file selected"
        upload_button.disabled = not session.can_upload
        clear_button.disabled = session.selected is None or session.uploading
        progress.visible = session.uploading

        if session.result is not None:
            result_title.value = SUCCESS_TITLE
            result_title.color = ft.Colors.GREEN
            result_lines.controls = [ft.Text(line) for line in session.summary_lines()]
            result_panel.bgcolor = ft.Colors.GREEN_50
            result_panel.visible = True
        elif session.error:
            result_title.value = FAILURE_TITLE
            result_title.color = ft.Colors.ERROR
            result_lines.controls = [ft.Text(session.error)]
            result_panel.bgcolor = ft.Colors.ERROR_CONTAINER
            result_panel.visible = True
        else:
            result_lines.controls = []
            result_panel.visible = False
        page.update()

    def _select(path: str) -> None:
        try:
            session.select(path)
        except ValueError as exc:
            logger.info("Rejected import file", extra={"file": path})
            session.clear()
            session.error = str(exc)
        _render()

    def _on_pick(e: ft.FilePickerResultEvent) -> None:
        selected = e.files[0] if e.files else None
        if not selected or not selected.path:
            return
        _select(selected.path)

    picker = ft.FilePicker(on_result=_on_pick)
    if page.overlay is None:
        page.overlay = []
    page.overlay.append(picker)

    async def _upload() -> None:
        upload_button.disabled = True
        clear_button.disabled = True
        progress.visible = True
        page.update()
        await session.upload()
        _render()

    def _on_clear(_e=None) -> None:
        session.clear()
        _render()

    def _dispose() -> None:
        if picker in page.overlay:
            page.overlay.remove(picker)

    upload_button.on_click = lambda _e: page.run_task(_upload)
    clear_button.on_click = _on_clear

    choose_button = ft.OutlinedButton(
        "Choose CSV file",
        icon=ft.Icons.FOLDER_OPEN,
        on_click=lambda _e: picker.pick_files(
            allow_multiple=False,
            allowed_extensions=[suffix.lstrip(".") for suffix in ACCEPTED_SUFFIXES],
        ),
    )

    formats = ft.Column(
        [
            ft.Row(
                [
                    ft.Text(fmt.bank, weight=ft.FontWeight.BOLD, width=90),
                    ft.Text(fmt.file_pattern, color=ft.Colors.ON_SURFACE_VARIANT),
                ]
            )
            for fmt in SUPPORTED_FORMATS
        ],
        spacing=6,
    )

    upload_card = build_card(
        "Import bank statement",
        ft.Column(
            [
                ft.Row([choose_button, file_label], spacing=12),
                ft.Row([upload_button, clear_button, progress], spacing=12),
                result_panel,
            ],
            spacing=16,
        ),
    )

    content = ft.Column(
        controls=[
            ft.Text("Import", size=24, weight=ft.FontWeight.BOLD),
            upload_card,
            build_card("Supported formats", formats),
        ],
        spacing=12,
        expand=True,
        scroll=ft.ScrollMode.AUTO,
    )

    app_bar = build_app_bar(ctx, "Import", page)
    view = ft.View(
        route=ROUTE,
        appbar=app_bar,
        controls=build_main_layout(page, ROUTE, content),
        padding=0,
    )
    view.data = {"dispose": _dispose}
    return view
