"""Reusable widget components for the desktop app."""

from __future__ import annotations

from typing import Optional

import flet as ft


def build_card(
    title: str,
    content: ft.Control,
    actions: Optional[list[ft.Control]] = None,
) -> ft.Card:
    """Build a standard card with title and content."""

    card_content = ft.Column(
        [
            ft.Container(
                content=ft.Text(title, size=18, weight=ft.FontWeight.BOLD),
                padding=ft.padding.only(left=16, right=16, top=16, bottom=8),
            ),
            ft.Divider(height=1),
            ft.Container(content=content, padding=16),
        ],
        spacing=0,
    )

    if actions:
        card_content.controls.append(
            ft.Container(
                content=ft.Row(actions, alignment=ft.MainAxisAlignment.END),
                padding=ft.padding.only(left=16, right=16, bottom=16),
            )
        )

    return ft.Card(content=card_content, elevation=2)


def build_stat_card(
    label: str,
    value_text: ft.Text,
    icon: Optional[str] = None,
    color: Optional[str] = None,
) -> ft.Card:
    """Build a KPI card around a ``value_text`` the caller keeps updating."""

    value_text.size = 28
    value_text.weight = ft.FontWeight.BOLD
    if color:
        value_text.color = color

    column = ft.Column(
        [value_text, ft.Text(label, size=14, color=ft.Colors.ON_SURFACE_VARIANT)],
        spacing=4,
        horizontal_alignment=ft.CrossAxisAlignment.START,
    )
    if icon:
        body: ft.Control = ft.Row(
            [ft.Icon(icon, size=36, color=color or ft.Colors.PRIMARY), ft.Container(width=12), column],
            alignment=ft.MainAxisAlignment.START,
        )
    else:
        body = column

    return ft.Card(content=ft.Container(content=body, padding=20), elevation=2)


def empty_state(message: str) -> ft.Container:
    """Simple empty-state placeholder."""

    return ft.Container(
        content=ft.Column(
            [
                ft.Icon(ft.Icons.INBOX, size=40, color=ft.Colors.ON_SURFACE_VARIANT),
                ft.Text(message, color=ft.Colors.ON_SURFACE_VARIANT),
            ],
            alignment=ft.MainAxisAlignment.CENTER,
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
        ),
        padding=20,
    )


def error_banner() -> ft.Container:
    """Hidden error strip; views set ``content.value`` and ``visible``."""

    return ft.Container(
        content=ft.Text("", color=ft.Colors.ON_ERROR_CONTAINER),
        bgcolor=ft.Colors.ERROR_CONTAINER,
        padding=12,
        border_radius=8,
        visible=False,
    )


def set_banner(banner: ft.Container, message: Optional[str]) -> None:
    banner.content.value = message or ""
    banner.visible = bool(message)
