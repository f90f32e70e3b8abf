"""Installed-layout import validation.

Components are authored grouped by component but installed grouped by type.
This package simulates that relocation and checks that every import in the
registry still resolves afterwards.
"""
