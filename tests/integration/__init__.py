"""Integration tests for roster-sync.

These tests run complete syncs through SyncCommand and the real
DirectoryAPI against an in-process directory service. They cover:
- Add, Delete and Move phases applied in order
- Group creation before moves
- Dry runs, interactive skip and abort
- Exit codes for refused invites and HTTP failures
"""
