"""Flet desktop shell for the finance tracker."""
