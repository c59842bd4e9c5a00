"""
Group Patcher — bulk Google Workspace group settings updates.

Package structure:
    group_patcher.config                 — environment / .env driven paths
    group_patcher.exceptions             — error taxonomy
    group_patcher.models                 — ClientIdentity, Group dataclasses
    group_patcher.google_auth            — interactive OAuth2 with on-disk token cache
    group_patcher.pagination             — cursor pagination over list endpoints
    group_patcher.google_factory         — GoogleServiceFactory (single credential, lazy services)
    group_patcher.groups_client          — Directory API group listing
    group_patcher.group_settings_client  — Groups Settings patching
    group_patcher.base                   — BaseScript abstract class (logging, timing, CLI)
    group_patcher.scripts                — console entry points
"""
