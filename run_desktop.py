#!/usr/bin/env python
"""Desktop app entrypoint for the finance tracker."""

import flet as ft

from fintrack.desktop.app import main

if __name__ == "__main__":
    ft.app(target=main)
