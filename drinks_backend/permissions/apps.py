# permissions/apps.py

"""
Role and capability definitions shared by every API module.
No models live here.
"""

from django.apps import AppConfig


class PermissionsConfig(AppConfig):
    name = "permissions"
    verbose_name = "Roles & Capabilities"
