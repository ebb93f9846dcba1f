"""Backup registry: tracks which sessions have recoverable backups on disk.

- **paths / layout**: identity rules and the on-disk directory layout
- **disk**: probing, stale deletion and moves of backup directories
- **registry**: in-memory collections and their persisted projection
- **managers**: legacy migration, startup validation, orphan conversion,
  and the registrar (``BackupMainService``)
- **routers / app**: HTTP surface for session-lifecycle callers
"""
