"""Registry managers for the backup service.

Each module encapsulates one step of the registry lifecycle (migration,
validation, orphan conversion) or the registrar that ties them together.
Managers log and absorb filesystem failures; they raise only for caller
errors (``ValueError``), never HTTP exceptions -- that translation is the
router's responsibility.
"""
